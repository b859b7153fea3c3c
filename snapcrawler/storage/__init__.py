from snapcrawler.storage.blob_store import BlobStore, LocalBlobStore
from snapcrawler.storage.archive import build_archive
