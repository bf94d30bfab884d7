import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_SUPABASE_URL = os.getenv('SUPABASE_URL')
_SUPABASE_KEY = os.getenv('SUPABASE_KEY')

_OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
_EMBEDDING_MODEL = os.getenv('EMBEDDING_MODEL', 'text-embedding-3-small')
_EMBEDDING_DIMENSIONS = int(os.getenv('EMBEDDING_DIMENSIONS', '1536'))

_PINECONE_API_KEY = os.getenv('PINECONE_API_KEY')
_PINECONE_INDEX_NAME = os.getenv('PINECONE_INDEX_NAME', 'weaveai-memories')
_PINECONE_CLOUD = os.getenv('PINECONE_CLOUD', 'aws')
_PINECONE_REGION = os.getenv('PINECONE_REGION', 'us-east-1')

_ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')
_CLAUDE_CHAT_MODEL = os.getenv('CLAUDE_CHAT_MODEL') or os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-5-20250929')

_LINEAR_API_KEY = os.getenv('LINEAR_API_KEY')
_LINEAR_API_URL = os.getenv('LINEAR_API_URL', 'https://api.linear.app/graphql')

_DEFAULT_MEMORY_MODE = os.getenv('DEFAULT_MEMORY_MODE', 'humanized')


class Config:
    """Central configuration for the Weave service."""

    SUPABASE_URL = _SUPABASE_URL
    SUPABASE_KEY = _SUPABASE_KEY

    OPENAI_API_KEY = _OPENAI_API_KEY
    EMBEDDING_MODEL = _EMBEDDING_MODEL
    EMBEDDING_DIMENSIONS = _EMBEDDING_DIMENSIONS

    PINECONE_API_KEY = _PINECONE_API_KEY
    PINECONE_INDEX_NAME = _PINECONE_INDEX_NAME
    PINECONE_CLOUD = _PINECONE_CLOUD
    PINECONE_REGION = _PINECONE_REGION

    ANTHROPIC_API_KEY = _ANTHROPIC_API_KEY
    CLAUDE_CHAT_MODEL = _CLAUDE_CHAT_MODEL

    LINEAR_API_KEY = _LINEAR_API_KEY
    LINEAR_API_URL = _LINEAR_API_URL

    DEFAULT_MEMORY_MODE = _DEFAULT_MEMORY_MODE


settings = Config()
