"""
Features Module - Self-contained feature units.

Each feature is a modular unit with its own logic:
- memory: Dual-mode memory engine (Pinecone + Supabase)
- database: Organized data access repositories
- chat: Conversational AI with memory tools
- linear: Linear API client, webhook sync and team mappings
"""
