#!/usr/bin/env python3
"""
Main CLI entrypoint for bill review.
"""

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Callable, List, Optional

from billscan.core import session
from billscan.core.acquisition import AcquisitionQueue, CameraCapture, discover_files, load_images
from billscan.core.config import Settings, load_settings
from billscan.core.editing import ACCEPT_KEY, CANCEL_KEY
from billscan.core.errors import AcquisitionError, MalformedResponse
from billscan.core.models import Status
from billscan.core.ocr import OCRServiceClient, parse_records
from billscan.core.processor import ProcessingOrchestrator
from billscan.core.reporting import (build_table_pdf, export_document, header_label,
                                     unique_path, write_csv)
from billscan.core.schema import headers, resolve_column
from billscan.core.session import AppState

EXPORT_FORMATS = ("doc", "csv", "pdf")
ESCAPE = "\x1b"

REVIEW_HELP = """Commands:
  show                 print the table
  edit ROW COL         edit one cell (Enter saves, Esc or Ctrl-C cancels)
  set ROW COL VALUE    replace one cell value
  add                  append an empty row
  del ROW              delete a row
  export [FORMAT]      write the table (doc, csv or pdf)
  help                 show this help
  quit                 leave the review"""


def load_records(path: Path):
    """Load records saved from an OCR response ({"data": [...]}) or a bare list."""
    with path.open("r", encoding="utf-8") as f:
        body = json.load(f)
    if isinstance(body, list):
        body = {"data": body}
    return parse_records(body)


def format_table(state: AppState) -> str:
    """Plain-text rendering of the dataset with row and column numbers."""
    hdrs = headers(state.dataset)
    if not state.dataset:
        return "(no rows)"
    columns = [f"{i}:{header_label(h)}" for i, h in enumerate(hdrs)]
    body = [[item.get(h) or "" for h in hdrs] for item in state.dataset]
    widths = [len(c) for c in columns]
    for values in body:
        widths = [max(w, len(v)) for w, v in zip(widths, values)]
    num_width = len(str(len(body) - 1))

    lines = [" " * num_width + "  " + "  ".join(c.ljust(w) for c, w in zip(columns, widths))]
    for idx, values in enumerate(body):
        cells = "  ".join(v.ljust(w) for v, w in zip(values, widths))
        lines.append(f"{str(idx).rjust(num_width)}  {cells}")
    return "\n".join(line.rstrip() for line in lines)


def export_table(state: AppState, settings: Settings, fmt: str = "doc") -> Path:
    """Write the current dataset in the requested format and return the file."""
    out_dir = settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    if fmt == "doc":
        return export_document(state.dataset, out_dir, settings.export_name)
    name = Path(settings.export_name).with_suffix(f".{fmt}").name
    dest = unique_path(out_dir, name)
    if fmt == "csv":
        write_csv(state.dataset, dest)
    elif fmt == "pdf":
        build_table_pdf(state.dataset, dest)
    else:
        raise ValueError(f"Unsupported export format: {fmt}")
    return dest


def _cell_exists(state: AppState, row: int, col: int) -> bool:
    return (state.dataset is not None and 0 <= row < len(state.dataset)
            and resolve_column(state.dataset, col) is not None)


def edit_cell(state: AppState, row: int, col: int,
              input_fn: Callable[[str], str] = input) -> AppState:
    """Interactive single-cell edit: Enter commits, Esc/Ctrl-C cancels, end of input commits."""
    state = session.begin_edit(state, row, col)
    print(f"  current: {state.edit.pending!r}")
    try:
        line = input_fn("  value> ")
    except KeyboardInterrupt:
        print()
        return session.handle_key(state, CANCEL_KEY)
    except EOFError:
        return session.blur(state)
    if ESCAPE in line:
        return session.handle_key(state, CANCEL_KEY)
    state = session.update_pending(state, line)
    return session.handle_key(state, ACCEPT_KEY)


def review_loop(state: AppState, settings: Settings, fmt: str = "doc",
                input_fn: Callable[[str], str] = input) -> AppState:
    """Let the user inspect and correct the table until they quit."""
    print(format_table(state))
    print("Type 'help' for commands.")
    while True:
        try:
            line = input_fn("billscan> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"[WARN] {e}")
            continue
        if not parts:
            continue
        cmd, args = parts[0].lower(), parts[1:]

        try:
            if cmd in ("quit", "q", "exit"):
                break
            elif cmd in ("help", "?"):
                print(REVIEW_HELP)
            elif cmd in ("show", "ls"):
                print(format_table(state))
            elif cmd == "edit" and len(args) == 2:
                row, col = int(args[0]), int(args[1])
                if not _cell_exists(state, row, col):
                    print(f"[WARN] No cell at row {row}, column {col}")
                    continue
                state = edit_cell(state, row, col, input_fn)
            elif cmd == "set" and len(args) >= 3:
                row, col = int(args[0]), int(args[1])
                if not _cell_exists(state, row, col):
                    print(f"[WARN] No cell at row {row}, column {col}")
                    continue
                state = session.begin_edit(state, row, col)
                state = session.update_pending(state, " ".join(args[2:]))
                state = session.commit_edit(state)
            elif cmd == "add":
                state = session.add_row(state)
                print(f"[OK] Added row {len(state.dataset) - 1}")
            elif cmd in ("del", "delete") and len(args) == 1:
                state = session.delete_row(state, int(args[0]))
            elif cmd == "export":
                target = args[0].lower() if args else fmt
                if target not in EXPORT_FORMATS:
                    print(f"[WARN] Unknown format {target!r}; choose from {', '.join(EXPORT_FORMATS)}")
                    continue
                try:
                    print(f"[OK] Wrote {export_table(state, settings, target)}")
                except OSError as e:
                    print(f"[ERROR] Could not export: {e}")
            else:
                print(f"[WARN] Unknown command: {line.strip()}")
                print(REVIEW_HELP)
        except ValueError:
            print("[WARN] ROW and COL must be whole numbers")
    return state


def acquire(args, settings: Settings) -> AppState:
    """Build the acquisition queue from files, folders and the camera."""
    queue = AcquisitionQueue()
    files = discover_files(Path(p) for p in args.paths)
    queue.extend(load_images(files, max_bytes=settings.max_upload_bytes))

    if args.camera:
        try:
            with CameraCapture(device_index=args.camera_index) as camera:
                photo = camera.capture()
            queue.enqueue(photo)
            print(f"[INFO] Captured {photo.name}")
        except AcquisitionError as e:
            print(f"[ERROR] {e}")
            print("[INFO] Continuing with selected files only")
    return session.enqueue(AppState(), *queue.queue())


def main(argv: Optional[List[str]] = None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Extract tables from bill images, review them and export a document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process two photos and review the result interactively
  billscan bill1.jpg bill2.png

  # Process a whole folder and write table.doc without reviewing
  billscan ./bills --no-review

  # Take a photo with the default camera
  billscan --camera

  # Review records saved from an earlier OCR response and export CSV
  billscan --from-json response.json --format csv
        """
    )
    parser.add_argument("paths", nargs="*",
                       help="Bill images (JPG, PNG, WEBP, BMP, PDF) or folders containing them")
    parser.add_argument("--camera", action="store_true",
                       help="Capture one photo from the camera and add it to the queue")
    parser.add_argument("--camera-index", type=int, default=0,
                       help="Camera device index (default: 0)")
    parser.add_argument("--from-json",
                       help="Load records from a JSON file instead of calling the OCR service")
    parser.add_argument("--config",
                       help="Optional JSON settings file")
    parser.add_argument("--service-url",
                       help="OCR service endpoint (or BILLSCAN_SERVICE_URL env var)")
    parser.add_argument("--timeout", type=float,
                       help="Request timeout in seconds (or BILLSCAN_TIMEOUT env var)")
    parser.add_argument("--output",
                       help="Folder for exported files (default: current folder)")
    parser.add_argument("--format", choices=EXPORT_FORMATS, default="doc",
                       help="Export format (default: doc)")
    parser.add_argument("--no-review", action="store_true",
                       help="Export right away instead of opening the review prompt")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Show detailed request information for debugging")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(Path(args.config) if args.config else None,
                                 service_url=args.service_url,
                                 timeout=args.timeout,
                                 output_dir=args.output)
    except ValueError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return 1

    if args.from_json:
        try:
            records = load_records(Path(args.from_json))
        except (OSError, ValueError, MalformedResponse) as e:
            print(f"[ERROR] Could not load {args.from_json}: {e}")
            return 1
        state = session.finish_submission(AppState(), records)
    else:
        state = acquire(args, settings)
        print(f"[INFO] Images selected: {session.summary(state)['images_selected']}")
        if not state.queue:
            print("No images selected.")
            return 0

        with OCRServiceClient(url=settings.service_url, timeout=settings.timeout,
                              upload_field=settings.upload_field) as client:
            state = ProcessingOrchestrator(client, verbose=args.verbose).submit(state)
        if state.status.state == Status.FAILED:
            print(f"[ERROR] Processing failed: {state.status.message}")
            return 1

    print(f"[INFO] Items extracted: {session.summary(state)['items_extracted']}")

    if args.no_review:
        print(format_table(state))
        try:
            print(f"[OK] Wrote {export_table(state, settings, args.format)}")
        except OSError as e:
            print(f"[ERROR] Could not export: {e}")
            return 1
        return 0

    review_loop(state, settings, args.format)
    return 0


if __name__ == "__main__":
    sys.exit(main())
