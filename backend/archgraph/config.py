import logging
import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

DEFAULT_GRAPH_FILE = os.path.join(os.path.dirname(__file__), "data", "sample_architecture.yaml")

GRAPH_FILE = os.getenv("ARCHGRAPH_GRAPH_FILE", DEFAULT_GRAPH_FILE)
LOG_LEVEL = os.getenv("ARCHGRAPH_LOG_LEVEL", "INFO")
DEFAULT_VERSION = os.getenv("ARCHGRAPH_DEFAULT_VERSION", "mvp")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ARCHGRAPH_CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
