"""
Analyze one short-form video from the command line.

Usage:
    python run_analysis.py <url-or-path> [--owner TAG] [--output FILE] [--brief]

Examples:
    python run_analysis.py 'https://www.tiktok.com/@user/video/123'
    python run_analysis.py ./clip.mp4 --owner sergio --output analysis.json
    python run_analysis.py ./clip.mp4 --brief
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from hookscope.config import HookScopeConfig
from hookscope.exceptions import HookScopeException
from hookscope.utils.logging_config import log_manager
from hookscope.video_pipeline import build_generation_request, run_analysis


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Analyze a short-form video into a creative brief")
    parser.add_argument("source", help="Video URL or path to a local video file")
    parser.add_argument("--owner", default=None, help="Credential pool tag (e.g. sergio); default pool if omitted")
    parser.add_argument("--output", default=None, help="Write the JSON result to this file instead of stdout")
    parser.add_argument("--brief", action="store_true", help="Include the generation request built from the result")
    parser.add_argument("--language", default="es", help="Language required in the generation brief")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    config = HookScopeConfig()
    log_manager.configure(config.logging)

    try:
        result = await run_analysis(args.source, owner_tag=args.owner, config=config)
    except HookScopeException as e:
        logger.error(f"Analysis failed ({e.error_code}): {e}")
        return 1

    payload = {"success": True, "data": result.to_dict(), "summary": result.summary()}
    if args.brief:
        payload["brief"] = build_generation_request(result, language=args.language).to_dict()

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Wrote analysis to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
