# nft_indexer/pipeline/__init__.py

from .batch_pipeline import BatchPipeline, BatchResult
