"""JSON export functionality.

Writes resources and conversations to a readable JSON document.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..chat.store import ConversationStore
from ..resources.ledger import ResourceLedger

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


@dataclass
class JSONExportResult:
    """Result of a JSON export operation."""

    success: bool
    file_path: Optional[Path] = None
    resources_exported: int = 0
    messages_exported: int = 0
    error: Optional[str] = None


class JSONExporter:
    """Exports resources and conversations to JSON format."""

    def __init__(
        self,
        ledger: ResourceLedger,
        conversations: Optional[ConversationStore] = None,
    ):
        """Initialize exporter.

        Args:
            ledger: Resource ledger to export
            conversations: Conversation store to export, if any
        """
        self.ledger = ledger
        self.conversations = conversations

    def export_all(self, output_path: Path, pretty: bool = True) -> JSONExportResult:
        """Export all data to JSON file.

        Args:
            output_path: Path for output file
            pretty: Pretty-print JSON output

        Returns:
            JSONExportResult with success status
        """
        resources = [r.model_dump() for r in self.ledger.list_resources()]

        conversations = {}
        if self.conversations is not None:
            conversations = {
                conv_id: [m.model_dump() for m in messages]
                for conv_id, messages in self.conversations.snapshot().items()
            }

        export_data = {
            "version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "resources": resources,
            "conversations": conversations,
        }

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                if pretty:
                    json.dump(export_data, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(export_data, f, ensure_ascii=False)
        except OSError as e:
            logger.error("JSON export to %s failed: %s", output_path, e)
            return JSONExportResult(success=False, error=str(e))

        return JSONExportResult(
            success=True,
            file_path=output_path,
            resources_exported=len(resources),
            messages_exported=sum(len(m) for m in conversations.values()),
        )
