
from dotenv import load_dotenv

# Load environment variables from .env as early as possible so that
# Settings and the API key check see the configured values.
load_dotenv()
