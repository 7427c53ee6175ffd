#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
sentimentbr entry point

Usage:
  python run.py                  # serve on 127.0.0.1:8000
  python run.py serve --reload   # dev mode with hot reload
  python run.py export           # write data/analises_sentimento_YYYY-MM-DD.csv
  python run.py routes           # list registered routes
  python run.py smoke            # smoke test a running server
"""
import argparse
import logging
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _banner(title):
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def cmd_serve(args) -> int:
    cmd = [sys.executable, "-m", "uvicorn", "sentimentbr.app:app",
           "--host", args.host, "--port", str(args.port)]
    if args.reload:
        cmd.append("--reload")
    _banner(f"🚀 http://{args.host}:{args.port}/  (docs: /docs)")
    return subprocess.call(cmd, cwd=str(ROOT))


def cmd_export(args) -> int:
    from sentimentbr.core.config import get_settings
    from sentimentbr.reports.csv_export import export_to_dir
    from sentimentbr.storage.store import JsonSentimentStore

    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    store = JsonSentimentStore(settings.data_path)
    out_dir = Path(args.out) if args.out else settings.DATA_DIR
    path = export_to_dir(store.list(), out_dir)
    if path:
        print(f"✅ {path}")
    return 0


def _walk_routes(routes):
    """Yield routes that carry a path; wrappers around included routers are opened up."""
    for route in routes:
        if hasattr(route, "path"):
            yield route
            continue
        nested = getattr(route, "routes", None)
        if nested is None:
            for value in getattr(route, "__dict__", {}).values():
                nested = getattr(value, "routes", None)
                if isinstance(nested, list):
                    break
        if isinstance(nested, list):
            yield from _walk_routes(nested)


def cmd_routes(args) -> int:
    from sentimentbr.app import app

    found = {}
    for route in _walk_routes(app.routes):
        methods = getattr(route, "methods", None)
        kind = ",".join(sorted(methods)) if methods else type(route).__name__
        found[(route.path or "/", kind)] = getattr(route, "name", "")
    for path, ops in app.openapi().get("paths", {}).items():
        for method, op in ops.items():
            found.setdefault((path, method.upper()), op.get("operationId", ""))
    routes = sorted((path, kind, name) for (path, kind), name in found.items())

    _banner("registered routes")
    for path, kind, name in routes:
        print(f"{kind:10s} {path:32s} ({name})")
    print(f"total: {len(routes)}")
    return 0


def cmd_smoke(args) -> int:
    import requests

    base = args.base.rstrip("/")
    ok = True
    for path in ("/api/health", "/api/stats"):
        try:
            r = requests.get(base + path, timeout=5)
            good = r.status_code == 200
            print(f"{'✅' if good else '❌'} GET {path} -> {r.status_code} {r.text[:120]}")
        except requests.RequestException as e:
            good = False
            print(f"❌ GET {path} -> {e}")
        ok = ok and good
    return 0 if ok else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="sentimentbr runner")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("serve", help="run the API with uvicorn")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("export", help="export all analyses to CSV")
    p.add_argument("--out", help="output directory (default: DATA_DIR)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("routes", help="list registered routes")
    p.set_defaults(func=cmd_routes)

    p = sub.add_parser("smoke", help="hit a running server")
    p.add_argument("--base", default="http://127.0.0.1:8000")
    p.set_defaults(func=cmd_smoke)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        args = parser.parse_args(["serve"])
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
