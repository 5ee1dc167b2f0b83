#!/usr/bin/env python3
"""Support Assistant CLI."""

import argparse
import logging
import sys
from config.settings import Settings
from schemas.messages import InboundMessage
from transport.console import ConsoleTransport
from orchestrator import SupportBotOrchestrator


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Support Assistant - answers questions from a support knowledge base"
    )
    parser.add_argument(
        "--question",
        "-q",
        type=str,
        help="Question to ask (omit for an interactive session)"
    )
    parser.add_argument(
        "--knowledge-base",
        type=str,
        help="Path to the knowledge base markdown file"
    )
    parser.add_argument(
        "--user",
        type=str,
        default="Console User",
        help="Display name of the asking user (default: Console User)"
    )
    parser.add_argument(
        "--conversation-id",
        type=str,
        default="console",
        help="Conversation ID used for history (default: console)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args()

    # Create settings
    settings = Settings(
        knowledge_base_path=args.knowledge_base,
        verbose=args.verbose,
    )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Initialize orchestrator
    try:
        orchestrator = SupportBotOrchestrator(
            transport=ConsoleTransport(show_typing=args.verbose),
            settings=settings
        )
    except Exception as e:
        print(f"Error starting assistant: {e}", file=sys.stderr)
        sys.exit(1)

    def ask(question: str):
        orchestrator.handle_message(InboundMessage(
            conversation_id=args.conversation_id,
            user_id=args.user,
            user_name=args.user,
            text=question,
            mentions_bot=True
        ))

    if args.question:
        ask(args.question)
        return

    orchestrator.handle_members_added(args.conversation_id)
    while True:
        try:
            question = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if question.lower() in ("exit", "quit"):
            break
        if question:
            ask(question)


if __name__ == "__main__":
    main()
