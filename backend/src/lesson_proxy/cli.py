"""Entrypoint: fill a lesson plan from the command line through the proxy server."""

import argparse
import asyncio
import logging
import sys

from lesson_proxy.config import settings
from lesson_proxy.orchestrator.context import LessonPlanContext
from lesson_proxy.orchestrator.fanout import AggregationStrategy
from lesson_proxy.orchestrator.form import LessonPlanForm
from lesson_proxy.orchestrator.proxy_client import ProxyClient


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an EPP 5 lesson plan")
    parser.add_argument("--base-url", default=settings.proxy_base_url, help="Proxy server URL")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in AggregationStrategy],
        default=settings.aggregation_strategy.value,
    )
    parser.add_argument("--format", choices=["text", "html"], default="text")
    for name in LessonPlanContext.model_fields:
        flag = "--" + name.replace("_", "-")
        parser.add_argument(flag, dest=name, default="")
    return parser


async def _submit(args: argparse.Namespace) -> int:
    context = LessonPlanContext(
        **{name: getattr(args, name) for name in LessonPlanContext.model_fields}
    )
    async with ProxyClient.create_http_client(base_url=args.base_url) as http:
        form = LessonPlanForm(
            ProxyClient(http).generate, strategy=AggregationStrategy(args.strategy)
        )
        outcome = await form.submit(context)

    for alert in form.alerts:
        print(alert, file=sys.stderr)
    if not outcome.ok:
        return 1

    if args.format == "html":
        print(form.output.render_html())
    else:
        print(form.output.render_text())
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s - %(message)s")
    args = _build_parser().parse_args(argv)
    return asyncio.run(_submit(args))


if __name__ == "__main__":
    sys.exit(main())
