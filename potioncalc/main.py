from __future__ import annotations
import logging
from potioncalc.core.config import Settings
from potioncalc.core.console import HELP_TEXT, format_state, handle_line
from potioncalc.core.db import bootstrap, make_engine, make_session_factory
from potioncalc.core.service import CalculatorService


def main() -> None:
    settings = Settings()  # loads from env/.env
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    engine = make_engine(settings)
    bootstrap(engine)
    SessionLocal = make_session_factory(engine)

    with SessionLocal() as db:
        service = CalculatorService(db, settings)
        print(HELP_TEXT)
        print(format_state(service.state, service.digits))
        while True:
            try:
                line = input("> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if line.strip().lower() in ("quit", "exit"):
                break
            out = handle_line(service, line)
            if out.get("say"):
                print(out["say"])


if __name__ == "__main__":
    main()
