#!/usr/bin/env python3
"""Export OpenAPI component schemas for Python classes.

Usage:
    python scripts/generate_schemas.py package.module:ClassName [package.module:Other ...]

Classes can be dataclasses, pydantic models, enums, protocols or plain
annotated classes. Output path and format come from OASGEN_OUTPUT_PATH and
OASGEN_OUTPUT_FORMAT (default: docs/schemas.yaml).
"""

import importlib
import logging
import sys
from pathlib import Path

from oasgen.builder.generator import DocumentGenerator
from oasgen.config import settings
from oasgen.export import write
from oasgen.model.python_types import introspect


def _load(target: str) -> type:
    module_name, _, attribute = target.partition(":")
    if not attribute:
        raise SystemExit(f"Expected module:ClassName, got {target!r}")
    obj = importlib.import_module(module_name)
    for part in attribute.split("."):
        obj = getattr(obj, part)
    return obj


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if len(sys.argv) < 2:
        raise SystemExit(__doc__)

    result = introspect(*(_load(target) for target in sys.argv[1:]))
    generator = DocumentGenerator(result.catalog, result.documentation, result.constraints)
    schemas = generator.generate(result.roots)

    output = write(schemas, Path(settings.output_path))
    print(f"{len(schemas)} component schemas written to {output}")


if __name__ == "__main__":
    main()
