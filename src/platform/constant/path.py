from pathlib import Path


# Project root (holds pyproject.toml and the .env files)
BASE_DIR = Path(__file__).resolve().parents[3]

LOG_DIR = BASE_DIR / 'logs'

# .env wins; .env.example keeps a fresh checkout runnable
ENV_FILE = BASE_DIR / '.env'
ENV_EXAMPLE_FILE = BASE_DIR / '.env.example'
