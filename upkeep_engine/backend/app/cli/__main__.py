# backend/app/cli/__main__.py
from __future__ import annotations

import argparse

from app.auth import issue_token
from app.cli.seed_demo import seed_demo
from app.db import session_scope
from app.logging_config import configure_logging
from app.services.alert_dispatch import send_proactive_alerts


def main() -> None:
    p = argparse.ArgumentParser(prog="python -m app.cli")
    sub = p.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="create a demo owner, properties and maintenance history")
    seed.add_argument("--user-email", default="owner@demo.local")
    seed.add_argument("--user-name", default="Demo Owner")
    seed.add_argument("--no-history", action="store_true")

    tok = sub.add_parser("token", help="mint a bearer token for a user id")
    tok.add_argument("user_id", type=int)

    sub.add_parser("send-alerts", help="run the weekly alert job once, without celery")

    args = p.parse_args()

    if args.command == "seed":
        out = seed_demo(user_email=args.user_email, user_name=args.user_name, with_history=not args.no_history)
        print({"ok": True, "user_id": out.user_id, "user_email": out.user_email, "property_ids": out.property_ids})
    elif args.command == "token":
        print(issue_token(args.user_id))
    elif args.command == "send-alerts":
        configure_logging()
        with session_scope() as db:
            print(send_proactive_alerts(db))


if __name__ == "__main__":
    main()
