"""Process-wide holder of the most recent extraction result."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import ValidationError

from docautofill import logger
from docautofill.exceptions import StorageError
from docautofill.typing.enums import StoreState
from docautofill.typing.models import AnalysisPayload, ExtractionResult, UploadedFile

if TYPE_CHECKING:
    from collections.abc import Callable

    from docautofill.typing.protocol import SessionStorage, StoreListener

DEFAULT_NAMESPACE = "arms"

_FILE_KEY = "uploaded_file"
_FILE_NAME_KEY = "uploaded_file_name"
_FILE_TYPE_KEY = "uploaded_file_type"
_ANALYSIS_KEY = "last_analysis"
_DATA_FIELDS_KEY = "dataFields"
_CATEGORY_KEY = "category"
_SUB_CATEGORY_KEY = "subcategory"
_AUTO_FILL_KEY = "auto_fill"

STORAGE_KEYS: tuple[str, ...] = (
    _FILE_KEY,
    _FILE_NAME_KEY,
    _FILE_TYPE_KEY,
    _ANALYSIS_KEY,
    _DATA_FIELDS_KEY,
    _CATEGORY_KEY,
    _SUB_CATEGORY_KEY,
    _AUTO_FILL_KEY,
)


class ExtractionStore:
    """Holds the latest extraction result and mirrors it to session storage.

    The store is Empty until `set` is called or a durable record is found at
    construction, and goes back to Empty only through `clear`. Storage
    failures are logged and never raised: the in-memory copy stays
    authoritative for the running session.
    """

    def __init__(
        self,
        storage: SessionStorage,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        persist_analysis: bool = True,
        rehydrate: bool = True,
    ) -> None:
        """Initialize the store.

        Args:
            storage (SessionStorage): Durable session-scoped storage.
            namespace (str): Prefix of every storage key.
            persist_analysis (bool): Also persist the full analysis payload.
            rehydrate (bool): Load a durable record left by a previous process.
        """
        self._storage = storage
        self._namespace = namespace
        self._persist_analysis = persist_analysis
        self._result: ExtractionResult | None = None
        self._listeners: list[StoreListener] = []
        if rehydrate:
            self._result = self._load()

    @property
    def namespace(self) -> str:
        """Return the storage key namespace."""
        return self._namespace

    @property
    def state(self) -> StoreState:
        """Return the lifecycle state."""
        return StoreState.EMPTY if self._result is None else StoreState.POPULATED

    @property
    def has_data(self) -> bool:
        """Return whether a result is held."""
        return self._result is not None

    @property
    def document_url(self) -> str | None:
        """Return the content handle of the uploaded file, if any."""
        if self._result is None or self._result.file is None:
            return None
        return self._result.file.data_url

    def get(self) -> ExtractionResult | None:
        """Return the current result."""
        return self._result

    def storage_key(self, name: str) -> str:
        """Return the namespaced storage key for an entry name."""
        return f"{self._namespace}_{name}"

    def set(self, result: ExtractionResult) -> None:
        """Replace the current result and persist it.

        Args:
            result (ExtractionResult): New extraction result.
        """
        self._result = result
        self._save(result)
        logger.info(
            "Extraction result stored",
            extra={
                "namespace": self._namespace,
                "category": result.category,
                "sub_category": result.sub_category,
                "fields": len(result.data_fields),
                "auto_fill": result.auto_fill,
            },
        )
        self._notify()

    def clear(self) -> None:
        """Drop the current result and every storage entry under the namespace."""
        self._result = None
        prefix = self.storage_key("")
        for key in [key for key in self._storage.keys() if key.startswith(prefix)]:  # noqa: SIM118
            try:
                self._storage.remove_item(key)
            except (StorageError, OSError):
                logger.exception("Failed to remove session entry", extra={"key": key})
        logger.info("Extraction result cleared", extra={"namespace": self._namespace})
        self._notify()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener called after every `set` and `clear`.

        Args:
            listener (StoreListener): Change callback.

        Returns:
            Callable[[], None]: Function removing the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def stored_analysis(self) -> AnalysisPayload | None:
        """Read the persisted analysis payload, if one was written.

        Returns:
            AnalysisPayload | None: Stored payload, or None when absent or unreadable.
        """
        raw = self._storage.get_item(self.storage_key(_ANALYSIS_KEY))
        if raw is None:
            return None
        try:
            return AnalysisPayload.model_validate_json(raw)
        except ValidationError:
            logger.warning("Stored analysis payload is invalid", extra={"namespace": self._namespace})
            return None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._result)

    def _save(self, result: ExtractionResult) -> None:
        entries: dict[str, str] = {
            _DATA_FIELDS_KEY: json.dumps(result.data_fields, ensure_ascii=False),
            _CATEGORY_KEY: result.category,
            _SUB_CATEGORY_KEY: result.sub_category,
            _AUTO_FILL_KEY: "true" if result.auto_fill else "false",
        }
        if result.file is not None:
            entries[_FILE_KEY] = result.file.data_url
            entries[_FILE_NAME_KEY] = result.file.name
            entries[_FILE_TYPE_KEY] = result.file.media_type
        if self._persist_analysis and result.analysis is not None:
            entries[_ANALYSIS_KEY] = result.analysis.model_dump_json(by_alias=True)

        stale = [name for name in (_FILE_KEY, _FILE_NAME_KEY, _FILE_TYPE_KEY, _ANALYSIS_KEY) if name not in entries]
        try:
            for name in stale:
                self._storage.remove_item(self.storage_key(name))
            for name, value in entries.items():
                self._storage.set_item(self.storage_key(name), value)
        except (StorageError, OSError, TypeError, ValueError):
            logger.exception("Failed to persist extraction result", extra={"namespace": self._namespace})

    def _load(self) -> ExtractionResult | None:
        try:
            return self._read_record()
        except (StorageError, OSError, ValueError):
            logger.exception("Failed to rehydrate extraction result", extra={"namespace": self._namespace})
            return None

    def _read_record(self) -> ExtractionResult | None:
        def read(name: str) -> str | None:
            return self._storage.get_item(self.storage_key(name))

        data_url, file_name, media_type = read(_FILE_KEY), read(_FILE_NAME_KEY), read(_FILE_TYPE_KEY)
        raw_fields = read(_DATA_FIELDS_KEY)
        has_file = bool(data_url and file_name and media_type)
        if not has_file and raw_fields is None:
            return None

        data_fields = json.loads(raw_fields) if raw_fields else {}
        if not isinstance(data_fields, dict):
            raise ValueError("Stored dataFields is not a JSON object")  # noqa: TRY003

        result = ExtractionResult(
            file=UploadedFile(data_url=data_url, name=file_name, media_type=media_type) if has_file else None,
            category=read(_CATEGORY_KEY) or "",
            sub_category=read(_SUB_CATEGORY_KEY) or "",
            data_fields=data_fields,
            analysis=None,
            auto_fill=read(_AUTO_FILL_KEY) == "true",
        )
        logger.info(
            "Extraction result rehydrated",
            extra={"namespace": self._namespace, "fields": len(result.data_fields)},
        )
        return result
