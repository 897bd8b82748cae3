"""meridian configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

# --- Paths ---
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("MERIDIAN_DB_PATH", str(DATA_DIR / "meridian.db")))

# --- API ---
API_HOST = "127.0.0.1"
API_PORT = int(os.getenv("MERIDIAN_API_PORT", "8001"))

# --- Feed fetching ---
FEED_TIMEOUT_SECONDS: float = 10.0
FEED_MAX_ENTRIES: int = 15
FEED_MAX_AGE_HOURS: int = 48
SNIPPET_MAX_CHARS: int = 500
FETCH_CONCURRENCY: int = int(os.getenv("FETCH_CONCURRENCY", "8"))
FEED_USER_AGENT = "TheMeridian/1.0 NewsAggregator"

# --- LLM ---
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL: str | None = os.getenv("OPENAI_BASE_URL") or None
LLM_MODEL: str = os.getenv("LLM_MODEL", "gpt-5-mini")
CLUSTER_MAX_TOKENS: int = 4096
SYNTHESIS_MAX_TOKENS: int = 8192

# --- Pipeline ---
MAX_STORIES_PER_RUN: int = 8
PIPELINE_INTERVAL_MINUTES: int = int(os.getenv("PIPELINE_INTERVAL_MINUTES", "30"))
PIPELINE_START_DELAY_SECONDS: float = 5.0
SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "1") not in ("0", "false", "no")

# --- Vocabularies ---
BIAS_RATINGS: tuple[str, ...] = ("left", "center-left", "center", "center-right", "right", "unrated")
TOPICS: tuple[str, ...] = (
    "politics", "business", "technology", "science", "health",
    "world", "sports", "entertainment", "environment",
)
REGIONS: tuple[str, ...] = ("us", "uk", "canada", "europe", "international")
DEFAULT_TOPIC = "world"
DEFAULT_REGION = "us"

# --- Source registry ---
# name -> home url, feed url, bias rating. Synced into the sources table on startup.
SOURCE_REGISTRY: dict[str, dict[str, str]] = {
    "The New York Times": {"url": "https://nytimes.com", "rss_url": "https://rss.nytimes.com/services/xml/rss/nyt/HomePage.xml", "bias_rating": "center-left"},
    "The Wall Street Journal": {"url": "https://wsj.com", "rss_url": "https://feeds.a.dj.com/rss/RSSWorldNews.xml", "bias_rating": "center-right"},
    "Associated Press": {"url": "https://apnews.com", "rss_url": "https://feedx.net/rss/ap.xml", "bias_rating": "center"},
    "Fox News": {"url": "https://foxnews.com", "rss_url": "https://moxie.foxnews.com/google-publisher/latest.xml", "bias_rating": "right"},
    "NPR": {"url": "https://npr.org", "rss_url": "https://feeds.npr.org/1001/rss.xml", "bias_rating": "center-left"},
    "Reuters": {"url": "https://reuters.com", "rss_url": "https://feedx.net/rss/reuters.xml", "bias_rating": "center"},
    "BBC News": {"url": "https://bbc.com/news", "rss_url": "http://feeds.bbci.co.uk/news/rss.xml", "bias_rating": "center"},
    "OAN": {"url": "https://oann.com", "rss_url": "https://www.oann.com/feed/", "bias_rating": "right"},
    "Ars Technica": {"url": "https://arstechnica.com", "rss_url": "https://feeds.arstechnica.com/arstechnica/index", "bias_rating": "center"},
    "TechCrunch": {"url": "https://techcrunch.com", "rss_url": "https://techcrunch.com/feed/", "bias_rating": "center-left"},
    "Wired": {"url": "https://wired.com", "rss_url": "https://www.wired.com/feed/rss", "bias_rating": "center-left"},
    "The Economist": {"url": "https://economist.com", "rss_url": "https://www.economist.com/latest/rss.xml", "bias_rating": "center"},
    "Al Jazeera": {"url": "https://aljazeera.com", "rss_url": "https://www.aljazeera.com/xml/rss/all.xml", "bias_rating": "center-left"},
    # UK
    "The Guardian": {"url": "https://theguardian.com", "rss_url": "https://www.theguardian.com/uk/rss", "bias_rating": "center-left"},
    "The Telegraph": {"url": "https://telegraph.co.uk", "rss_url": "https://www.telegraph.co.uk/rss.xml", "bias_rating": "center-right"},
    "The Independent": {"url": "https://independent.co.uk", "rss_url": "https://www.independent.co.uk/news/uk/rss", "bias_rating": "center-left"},
    "Sky News": {"url": "https://news.sky.com", "rss_url": "https://feeds.skynews.com/feeds/rss/home.xml", "bias_rating": "center"},
    "Daily Mail": {"url": "https://dailymail.co.uk", "rss_url": "https://www.dailymail.co.uk/articles.rss", "bias_rating": "right"},
    "BBC UK": {"url": "https://bbc.co.uk/news/uk", "rss_url": "http://feeds.bbci.co.uk/news/uk/rss.xml", "bias_rating": "center"},
    # Canada
    "CBC News": {"url": "https://cbc.ca/news", "rss_url": "https://www.cbc.ca/webfeed/rss/rss-topstories", "bias_rating": "center"},
    "National Post": {"url": "https://nationalpost.com", "rss_url": "https://nationalpost.com/feed", "bias_rating": "center-right"},
    "Global News Canada": {"url": "https://globalnews.ca", "rss_url": "https://globalnews.ca/feed/", "bias_rating": "center"},
    # Europe
    "Deutsche Welle": {"url": "https://dw.com", "rss_url": "https://rss.dw.com/rdf/rss-en-all", "bias_rating": "center"},
    "France 24": {"url": "https://france24.com", "rss_url": "https://www.france24.com/en/rss", "bias_rating": "center"},
    "Euronews": {"url": "https://euronews.com", "rss_url": "https://www.euronews.com/rss", "bias_rating": "center"},
    "Politico Europe": {"url": "https://politico.eu", "rss_url": "https://www.politico.eu/feed/", "bias_rating": "center"},
    "Der Spiegel International": {"url": "https://spiegel.de/international", "rss_url": "https://www.spiegel.de/international/index.rss", "bias_rating": "center-left"},
    # International
    "South China Morning Post": {"url": "https://scmp.com", "rss_url": "https://www.scmp.com/rss/91/feed", "bias_rating": "center"},
    "The Japan Times": {"url": "https://japantimes.co.jp", "rss_url": "https://www.japantimes.co.jp/feed/", "bias_rating": "center"},
    "Times of India": {"url": "https://timesofindia.indiatimes.com", "rss_url": "https://timesofindia.indiatimes.com/rssfeedstopstories.cms", "bias_rating": "center"},
    "ABC News Australia": {"url": "https://abc.net.au/news", "rss_url": "https://www.abc.net.au/news/feed/51120/rss.xml", "bias_rating": "center"},
    "The Hindu": {"url": "https://thehindu.com", "rss_url": "https://www.thehindu.com/feeder/default.rss", "bias_rating": "center"},
    "Kyiv Independent": {"url": "https://kyivindependent.com", "rss_url": "https://kyivindependent.com/feed/", "bias_rating": "center"},
    "UN News": {"url": "https://news.un.org", "rss_url": "https://news.un.org/feed/subscribe/en/news/all/rss.xml", "bias_rating": "center"},
}
