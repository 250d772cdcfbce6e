"""
Link Shelf core package.

Modules
───────
models       — Pydantic data models (NewLink, SavedLink, ChatMessage, Category)
extractor    — title / summary extraction from the analysis text
tagger       — ordered keyword tagging
categorizer  — AI or keyword category classification
responses    — AI response envelope → plain text adapter
pipeline     — URL → NewLink extraction pipeline (Claude + web_search)
chat         — grounded chat: context, system prompt, source resolution
library      — filter / sort / search helpers for the link list
store        — SQLite-backed link store (create, list, update, delete)
"""
