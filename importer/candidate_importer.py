"""
Candidate Importer

Embeds every candidate in candidates.json and upserts the vectors into the candidate index.
Candidates are processed in batches with fixed pauses to stay under API rate limits.
"""

import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Dict, Optional
from tqdm import tqdm

from config import settings
from embedding.embedder import CandidateEmbedder
from embedding.vectorstore import (
    CandidateVectorStore,
    build_candidate_metadata,
    create_candidate_description,
    load_candidates_from_file
)

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Counts from one import run"""
    total: int = 0
    processed: int = 0
    failed: int = 0


class CandidateImporter:
    """
    Batch importer for candidate profiles
    """

    def __init__(
        self,
        vector_store: CandidateVectorStore,
        embedder: CandidateEmbedder,
        batch_size: int = settings.IMPORT_BATCH_SIZE,
        item_delay: float = settings.IMPORT_ITEM_DELAY,
        batch_pause: float = settings.IMPORT_BATCH_PAUSE,
        sleep: Optional[Callable[[float], None]] = None
    ):
        """
        Initialize importer

        Args:
            vector_store: Target candidate vector store
            embedder: Embedder for candidate descriptions
            batch_size: Candidates embedded per upsert
            item_delay: Seconds to wait after each embedded candidate
            batch_pause: Seconds to wait between batches
            sleep: Sleep function (time.sleep when omitted)
        """
        self.vector_store = vector_store
        self.embedder = embedder
        self.batch_size = batch_size
        self.item_delay = item_delay
        self.batch_pause = batch_pause
        self.sleep = sleep or time.sleep

    def build_vector(self, candidate: Dict) -> Dict:
        """Embed one candidate and shape it as an index record"""
        candidate_text = create_candidate_description(candidate)
        embedding = self.embedder.embed_document(candidate_text)

        return {
            'id': candidate['email'],
            'values': embedding,
            'metadata': build_candidate_metadata(candidate)
        }

    def run(self, candidates: List[Dict]) -> ImportSummary:
        """
        Import candidates into the vector index

        A candidate that fails to embed is logged and skipped. A repeated email
        keeps its first record; later copies are counted as failed.

        Args:
            candidates: Candidate dictionaries

        Returns:
            Summary with total, processed and failed counts
        """
        summary = ImportSummary(total=len(candidates))
        imported = set()

        self.vector_store.create_index()

        batch_starts = range(0, summary.total, self.batch_size)
        for start in tqdm(batch_starts, desc="Importing candidates", unit="batch"):
            end = min(start + self.batch_size, summary.total)
            logger.info(f"Processing batch {start + 1} to {end} of {summary.total}...")

            vectors = []
            for candidate in candidates[start:end]:
                email = candidate.get('email')
                if email in imported:
                    summary.failed += 1
                    logger.warning(f"Skipping duplicate candidate {email}")
                    continue

                try:
                    vector = self.build_vector(candidate)
                    vectors.append(vector)
                    imported.add(vector['id'])
                    summary.processed += 1

                    self.sleep(self.item_delay)

                    if summary.processed % 10 == 0:
                        logger.info(f"Processed {summary.processed}/{summary.total} candidates")
                except Exception as e:
                    summary.failed += 1
                    logger.error(f"Error processing candidate {candidate.get('email')}: {str(e)}")

            if vectors:
                self.vector_store.upsert(vectors)
                logger.info(f"Upserted {len(vectors)} vectors to index {self.vector_store.index_name}")

            if end < summary.total:
                logger.info("Pausing between batches...")
                self.sleep(self.batch_pause)

        logger.info(
            f"Imported {summary.processed} of {summary.total} candidates "
            f"({summary.failed} failed)"
        )
        return summary


def main():
    """Import candidates.json into the candidate index"""
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    logger.info("Starting candidate import...")

    try:
        logger.info(f"Reading candidates from {settings.CANDIDATES_PATH}...")
        candidates = load_candidates_from_file(settings.CANDIDATES_PATH)

        importer = CandidateImporter(CandidateVectorStore(), CandidateEmbedder())
        summary = importer.run(candidates)
    except Exception as e:
        logger.error(f"Error importing candidates: {str(e)}", exc_info=True)
        sys.exit(1)

    print(f"\n{'='*60}")
    print("IMPORT SUMMARY")
    print(f"{'='*60}")
    print(f"Total candidates: {summary.total}")
    print(f"Imported: {summary.processed}")
    print(f"Failed: {summary.failed}")


if __name__ == "__main__":
    main()
