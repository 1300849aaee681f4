"""
Load environment variables from a .env file in the current directory.
"""
from pathlib import Path

from dotenv import load_dotenv


def load_env(env_file: str = ".env") -> bool:
    """
    Load variables from env_file, overriding values already in the environment.

    A missing file is not an error.

    Returns:
        True if at least one variable was set
    """
    env_path = Path.cwd() / env_file
    if not env_path.is_file():
        return False
    return load_dotenv(env_path, override=True)
