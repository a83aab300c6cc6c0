"""Scrape → extract → cache pipeline.

``ScrapePipeline.run`` turns a URL and a field list into a cached
``StructuredRecord`` and the key it can be retrieved under:

    validate → fetch → cache raw (put + read back) → extract
             → cache structured (put + read back) → done

Each run walks the :class:`PipelineState` machine.  The first failure moves
the run to ``FAILED`` and is re-raised to the caller; nothing is retried and
entries already written stay in the cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from scrapelens.cache.keys import new_key
from scrapelens.cache.store import RAW, STRUCTURED, CacheStore
from scrapelens.config import settings
from scrapelens.errors import CacheError, PipelineError, ScrapeLensError
from scrapelens.extraction.client import extract_fields
from scrapelens.extraction.normalize import StructuredRecord
from scrapelens.logger import get_module_logger
from scrapelens.pipeline.validation import validate_request
from scrapelens.scraper.extractor import fetch_content
from scrapelens.scraper.models import RawContent

logger = get_module_logger("pipeline")

Fetcher = Callable[[str], RawContent]
Extractor = Callable[[str, list[str], str], StructuredRecord]
KeyFactory = Callable[[str], str]

RAW_KEY_PREFIX = "raw_data"
STRUCTURED_KEY_PREFIX = "formatted_data"


class PipelineState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    CACHING_RAW = "caching_raw"
    EXTRACTING = "extracting"
    CACHING_STRUCTURED = "caching_structured"
    DONE = "done"
    FAILED = "failed"


_TERMINAL = {PipelineState.DONE, PipelineState.FAILED}


@dataclass
class PipelineResult:
    record: StructuredRecord
    key: str
    raw_key: str
    model: str


@dataclass
class PipelineRun:
    """A single invocation of the pipeline and the states it went through."""

    pipeline: ScrapePipeline
    url: Optional[str]
    fields: Union[str, Iterable[str], None]
    model: str
    state: PipelineState = PipelineState.IDLE
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    raw_key: Optional[str] = None
    key: Optional[str] = None
    error: Optional[BaseException] = None

    def _enter(self, state: PipelineState) -> None:
        if self.state in _TERMINAL:
            raise PipelineError(f"Run already finished in state {self.state.value!r}")
        self.state = state
        self.history.append(state)
        logger.info(f"[{self.url}] -> {state.value}")

    def execute(self) -> PipelineResult:
        """Run every step in order and return the cached record and its key.

        Raises:
            ValidationError: Before any I/O, for a missing URL or empty fields.
            FetchError, CacheError, ExtractionError, ExtractionTimeout:
                Propagated unchanged from the failing step.
            PipelineError: For any other unexpected exception (chained).
        """
        if self.state is not PipelineState.IDLE:
            raise PipelineError(f"Run already started (state {self.state.value!r})")
        try:
            return self._execute()
        except Exception as exc:
            self.state = PipelineState.FAILED
            self.history.append(PipelineState.FAILED)
            if not isinstance(exc, ScrapeLensError):
                wrapped = PipelineError(f"Unexpected pipeline failure: {exc}")
                self.error = wrapped
                logger.exception(f"[{self.url}] failed unexpectedly")
                raise wrapped from exc
            self.error = exc
            logger.error(f"[{self.url}] failed: {type(exc).__name__}: {exc.message}")
            raise

    def _execute(self) -> PipelineResult:
        p = self.pipeline
        url, field_list = validate_request(self.url, self.fields)
        self.url = url

        self._enter(PipelineState.FETCHING)
        content = p.fetcher(url)

        self._enter(PipelineState.CACHING_RAW)
        self.raw_key = p.key_factory(RAW_KEY_PREFIX)
        p.store.put(RAW, self.raw_key, content.to_dict())
        stored_raw = p.store.get(RAW, self.raw_key)
        if stored_raw is None:
            raise CacheError(
                f"Raw content vanished right after writing {self.raw_key!r}",
                details={"namespace": RAW, "key": self.raw_key},
            )
        cached_content = RawContent.from_dict(stored_raw)

        self._enter(PipelineState.EXTRACTING)
        record = p.extractor(cached_content.body, field_list, self.model)

        self._enter(PipelineState.CACHING_STRUCTURED)
        self.key = p.key_factory(STRUCTURED_KEY_PREFIX)
        p.store.put(STRUCTURED, self.key, record)
        stored_record = p.store.get(STRUCTURED, self.key)
        if stored_record is None:
            raise CacheError(
                f"Record vanished right after writing {self.key!r}",
                details={"namespace": STRUCTURED, "key": self.key},
            )

        self._enter(PipelineState.DONE)
        return PipelineResult(
            record=stored_record, key=self.key, raw_key=self.raw_key, model=self.model
        )


class ScrapePipeline:
    """Composes fetcher, cache store and extraction client.

    Collaborators are injected so the same pipeline can be driven by the HTTP
    layer, the CLI, or tests with fakes.  One instance may serve concurrent
    runs: all per-run state lives on :class:`PipelineRun`.
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: Optional[Fetcher] = None,
        extractor: Optional[Extractor] = None,
        key_factory: Optional[KeyFactory] = None,
    ):
        self.store = store
        self.fetcher = fetcher or fetch_content
        self.extractor = extractor or extract_fields
        self.key_factory = key_factory or new_key

    def new_run(
        self,
        url: Optional[str],
        fields: Union[str, Iterable[str], None],
        model: Optional[str] = None,
    ) -> PipelineRun:
        """Create an idle run; call :meth:`PipelineRun.execute` to start it."""
        return PipelineRun(
            pipeline=self,
            url=url,
            fields=fields,
            model=(model or "").strip() or settings.default_model,
        )

    def run(
        self,
        url: Optional[str],
        fields: Union[str, Iterable[str], None],
        model: Optional[str] = None,
    ) -> PipelineResult:
        """Validate, fetch, extract and cache; return the record and its key."""
        return self.new_run(url, fields, model).execute()
