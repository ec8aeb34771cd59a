from __future__ import annotations

import argparse
import contextlib
import json
import sys
from typing import Iterator, Sequence

from .config import load_config, resolve_sink_url
from .config_schema import AppConfig
from .errors import ConfigError, RetrievalError, SinkError
from .pipeline import LinkAnalyzer
from .run_log import RunLogger
from .sink import SheetSink


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="social_archiver")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser(
        "analyze",
        help="Analyze a social media post URL and print the archival record as JSON.",
    )
    analyze.add_argument("url", help="Post URL to analyze.")
    analyze.add_argument(
        "--config",
        help="Path to YAML config file (defaults apply when omitted).",
    )
    analyze.add_argument(
        "--offline",
        action="store_true",
        help="Run without network calls using a deterministic stub retriever.",
    )
    analyze.add_argument(
        "--save",
        action="store_true",
        help="Post the record to the Apps Script URL from the sink config.",
    )
    analyze.add_argument(
        "--log",
        help="Append JSONL audit events to this file.",
    )
    analyze.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the retrieval call.",
    )
    analyze.set_defaults(_handler=_cmd_analyze)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


@contextlib.contextmanager
def _maybe_logger(path: str | None) -> Iterator[RunLogger | None]:
    if not path:
        yield None
        return
    with RunLogger.open(path) as log:
        yield log


def _cmd_analyze(args: argparse.Namespace) -> int:
    with _maybe_logger(getattr(args, "log", None)) as log:
        if log is not None:
            log.info("analyze_command_started", url=args.url, config_path=args.config)

        try:
            cfg = load_config(args.config) if args.config else AppConfig()

            if bool(getattr(args, "offline", False)):
                from .offline import OfflinePostRetriever

                analyzer = LinkAnalyzer(
                    OfflinePostRetriever(), strategy=cfg.strategy, logger=log
                )
            else:
                analyzer = LinkAnalyzer.from_config(cfg, logger=log)

            post = analyzer.analyze(args.url, timeout=args.timeout)
            print(json.dumps(post.to_payload(), indent=2, ensure_ascii=False))

            if args.save:
                script_url = resolve_sink_url(cfg)
                if not script_url:
                    raise ConfigError(
                        f"Google Apps Script URL is missing (set {cfg.sink.script_url_env})."
                    )
                SheetSink(script_url, timeout_seconds=cfg.sink.timeout_seconds).save(post)
                if log is not None:
                    log.info("record_saved", url=args.url)
                print("saved=true")

            return 0
        except Exception as e:
            if log is not None:
                log.exception("analyze_command_failed", exc=e, url=args.url)
            raise


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except (RetrievalError, SinkError) as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
