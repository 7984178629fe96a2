"""
Structured errors in log lines

Run:
    python examples/basic/logging_errors.py
"""

import logging
import sys

import erreur


def connect(addr: str) -> None:
    raise erreur.new("connection error", erreur.integer("code", 1234), addr=addr)


def load_data() -> None:
    try:
        connect("example.com")
    except erreur.Structured as e:
        raise erreur.wrap(e, "failed to load data", erreur.string("table", "users"))


def main() -> None:
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(erreur.json_handler(sys.stdout, erreur.example_encoder_config()))
    log = erreur.get_logger("example")

    try:
        load_data()
    except Exception as e:
        log.error("request failed", erreur.log_field(e))
        # {"level":"error","msg":"request failed","error":{"msg":"failed to load data","table":"users","cause":{...}}}

        print(str(e))
        # failed to load data: connection error

        found, ok = erreur.as_structured(e)
        if ok:
            print(found.json())

    # nil-propagation: nothing to wrap, nothing logged under "error"
    log.info("no error here", erreur.log_field(erreur.wrap(None, "unused")))


if __name__ == "__main__":
    main()
