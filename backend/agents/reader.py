"""
Node 1 (pdf mode only) — Reader.

Reads:  state["file_path"], state["upload_dir"]
Writes: state["text"]

The uploaded file is deleted by parse_pdf() whether or not extraction succeeds.
PDFParseError propagates out of the graph.
"""

import time
from typing import Any

from state import QuizState
from tools.pdf_reader import parse_pdf


def reader_node(state: QuizState) -> dict[str, Any]:
    started_at = time.time()
    logs: list[dict] = list(state.get("logs") or [])
    pipeline_trace: list[dict] = list(state.get("pipeline_trace") or [])

    ts = lambda: int(time.time() * 1000)  # noqa: E731

    logs.append({"agent": "reader", "msg": f"Extracting text from {state['file_path']}...", "ts": ts()})

    text = parse_pdf(state["file_path"], state["upload_dir"])

    duration_ms = int((time.time() - started_at) * 1000)
    pipeline_trace.append({"agent": "reader", "started_at": started_at, "ms": duration_ms})
    logs.append({"agent": "reader", "msg": f"Extracted {len(text)} characters in {duration_ms}ms", "ts": ts()})

    return {
        "text": text,
        "logs": logs,
        "pipeline_trace": pipeline_trace,
    }
