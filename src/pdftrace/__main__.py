# Copyright 2026 pdftrace Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point: python -m pdftrace"""

import asyncio

from pdftrace import configure_logging, generate_summary
from pdftrace.config import PdfTraceConfig


def main() -> None:
    config = PdfTraceConfig.from_env()
    configure_logging(config)
    asyncio.run(generate_summary(config))


if __name__ == "__main__":
    main()
