"""Command-line entry point: generate one test from a description."""
from __future__ import annotations
import argparse
import logging
import sys
import time
from dataclasses import replace

import yaml

from ollama_testgen.common.config import load_settings
from ollama_testgen.common.errors import GenerationError, ParseError, ServiceError
from ollama_testgen.common.logging_setup import setup_logging
from ollama_testgen.common.templates import load_template, render_prompt
from ollama_testgen.generation.client import display_text
from ollama_testgen.generation.factory import build_client
from ollama_testgen.generation.transport import HttpxTransport

LOGGER = logging.getLogger("testgen.cli")

def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Generate a unit test with a local Ollama model")
    ap.add_argument("--text", required=True, help="Code or behaviour to test")
    ap.add_argument("--cfg", default=None, help="Config path (default: configs/client.yaml)")
    ap.add_argument("--model", default=None, help="Override the configured model")
    ap.add_argument("--timeout", type=float, default=None, help="Deadline for the request, in seconds")
    ap.add_argument("--raw", action="store_true", help="Print the raw response body instead of the parsed code")
    args = ap.parse_args(argv)

    try:
        settings = load_settings(args.cfg)
        if args.model:
            settings = replace(settings, model=args.model)
        prompt = render_prompt(load_template(settings.template_path), args.text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERR: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level)

    with HttpxTransport(timeout=settings.timeout) as transport:
        client = build_client(settings, transport=transport)
        start = time.time()
        try:
            if args.raw:
                output = client.generate_raw(prompt, timeout=args.timeout)
            else:
                output = client.generate_test(prompt, timeout=args.timeout).code
        except ServiceError as e:
            LOGGER.error("Generation service error (status %s): %s", e.status_code, display_text(e.message))
            return 1
        except (GenerationError, ParseError) as e:
            LOGGER.error("%s", e)
            return 1

    LOGGER.info("Latency: %sms", int((time.time() - start) * 1000))
    print(display_text(output))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
