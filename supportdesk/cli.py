#!/usr/bin/env python3
"""
Support Desk - Command Line Interface

Commands:
    ask          - Ask a single question
    chat         - Start an interactive chat session
    diagnostics  - Load a live knowledge domain and show its provenance
    products     - Show the featured products overview
    topics       - List topics and their knowledge files

Usage:
    python -m supportdesk.cli ask "What is tablet warranty period?"
    python -m supportdesk.cli chat
    python -m supportdesk.cli diagnostics warranty

For help on a specific command:
    python -m supportdesk.cli <command> --help
"""

import argparse
import sys

from supportdesk.config import settings
from supportdesk.exceptions import SourceUnavailable
from supportdesk.logger import get_logger, init_logging
from supportdesk.messages import msg

init_logging()
logger = get_logger(__name__)


def build_composer(args: argparse.Namespace):
    """Composer wired from settings; --no-responder forces direct extraction."""
    from supportdesk.core.llm import build_responder
    from supportdesk.knowledge.service import KnowledgeService
    from supportdesk.knowledge.store import CorpusStore
    from supportdesk.pipeline.composer import ResponseComposer

    responder = None if args.no_responder else build_responder()
    knowledge = KnowledgeService(store=CorpusStore(args.data_dir))
    return ResponseComposer(knowledge=knowledge, responder=responder)


def cmd_ask(args: argparse.Namespace) -> int:
    """Ask a single question and print the reply."""
    print(f"\n❓ Question: {args.question}")
    print("-" * 50)

    composer = build_composer(args)
    try:
        reply = composer.respond(args.question)
    except SourceUnavailable as e:
        logger.error(f"Ask failed: {e}")
        print(f"\n💬 Answer:\n{msg('error.source_unavailable')}")
        return 1

    print(f"\n💬 Answer:\n{reply.answer}")
    if args.verbose:
        print("\n📊 Details:")
        print(f"   Topic:    {reply.topic.value}")
        print(f"   Intent:   {reply.intent or '-'}")
        print(f"   Origin:   {reply.origin}")
        print(f"   Strategy: {reply.strategy or '-'}")
    return 0


def cmd_chat(args: argparse.Namespace) -> int:
    """Start an interactive chat session."""
    print("\n" + "=" * 60)
    print("🤖 Support Desk - Interactive Chat")
    print("=" * 60)
    print("Type your questions below. Commands:")
    print("  /reset  - Clear the cached live knowledge")
    print("  /diag   - Show warranty knowledge provenance")
    print("  /quit   - Exit chat")
    print("-" * 60)

    composer = build_composer(args)

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n👋 Goodbye!")
            break

        if not user_input:
            continue

        command = user_input.lower()
        if command == "/quit":
            print("\n👋 Goodbye!")
            break
        if command == "/reset":
            composer.knowledge.reset()
            print(f"🗑️  {msg('cache.cleared')}\n")
            continue
        if command == "/diag":
            print_diagnostics(composer.knowledge.diagnostics("warranty"))
            continue

        try:
            print(f"Bot: {composer.answer(user_input)}\n")
        except SourceUnavailable as e:
            logger.error(f"Chat error: {e}")
            print(f"Bot: {msg('error.source_unavailable')}\n")

    return 0


def print_diagnostics(info: dict) -> None:
    print(f"\n🔎 Domain: {info['domain']}")
    print(f"   Source:  {info['source'] or 'not loaded'}")
    print(f"   Fresh:   {info['fresh']}")
    print(f"   Length:  {info['length']} chars")
    if info["preview"]:
        print(f"\n{info['preview']}")
    print()


def cmd_diagnostics(args: argparse.Namespace) -> int:
    """Load a live domain through the cache and report where it came from."""
    from supportdesk.knowledge.service import KnowledgeService
    from supportdesk.knowledge.store import CorpusStore

    service = KnowledgeService(store=CorpusStore(args.data_dir))
    if not service.is_live(args.domain):
        print(f"❌ '{args.domain}' is not a live knowledge domain ({', '.join(service.cache.domains)})")
        return 1
    try:
        service.knowledge_text(args.domain)
    except SourceUnavailable as e:
        print(f"❌ {e}")
        return 1

    print_diagnostics(service.diagnostics(args.domain))
    return 0


def cmd_products(args: argparse.Namespace) -> int:
    """Print the featured products overview."""
    from supportdesk.knowledge.service import KnowledgeService
    from supportdesk.knowledge.store import CorpusStore

    service = KnowledgeService(store=CorpusStore(args.data_dir))
    print(service.products_overview())
    return 0


def cmd_topics(args: argparse.Namespace) -> int:
    """List topics and whether a knowledge file backs each one."""
    from supportdesk.knowledge.store import CorpusStore
    from supportdesk.pipeline.classifier import Topic

    store = CorpusStore(args.data_dir)
    print(f"\n📚 Knowledge directory: {store.directory}")
    for topic in Topic:
        if topic is Topic.NONE:
            continue
        status = "✅" if store.exists(topic.value) else "⚠️  missing"
        print(f"   {topic.value:<10} {status}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog="supportdesk",
        description="Heuristic customer support assistant CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Ask a question:
    python -m supportdesk.cli ask "How do I return an item?"
    python -m supportdesk.cli ask "What is tablet warranty period?" -v

  Interactive chat:
    python -m supportdesk.cli chat --no-responder

  Knowledge sources:
    python -m supportdesk.cli diagnostics warranty
    python -m supportdesk.cli topics
        """
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--data-dir",
        default=settings.data.directory,
        help="Directory with <topic>.txt knowledge files"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ask_parser = subparsers.add_parser("ask", help="Ask a single question")
    ask_parser.add_argument("question", help="The question to ask")
    ask_parser.add_argument(
        "--no-responder",
        action="store_true",
        help="Skip the generative responder"
    )
    ask_parser.set_defaults(func=cmd_ask)

    chat_parser = subparsers.add_parser("chat", help="Start an interactive chat session")
    chat_parser.add_argument(
        "--no-responder",
        action="store_true",
        help="Skip the generative responder"
    )
    chat_parser.set_defaults(func=cmd_chat)

    diag_parser = subparsers.add_parser("diagnostics", help="Show knowledge provenance")
    diag_parser.add_argument("domain", nargs="?", default="warranty", help="Live domain name")
    diag_parser.set_defaults(func=cmd_diagnostics)

    products_parser = subparsers.add_parser("products", help="Show featured products")
    products_parser.set_defaults(func=cmd_products)

    topics_parser = subparsers.add_parser("topics", help="List topics and knowledge files")
    topics_parser.set_defaults(func=cmd_topics)

    return parser


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        init_logging(level="DEBUG", force=True)

    try:
        settings.validate_all()
    except ValueError as e:
        print(f"❌ Configuration error: {e}")
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
