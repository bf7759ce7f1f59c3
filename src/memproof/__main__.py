"""
Memory commitment CLI entry point.

Commit to a memory image, produce the context and proof of a byte range, and
check or apply them the way the dispute contract does.

Usage::

    python -m memproof root memory.bin
    python -m memproof context memory.bin --offset 1536 --length 4096 > range.json
    python -m memproof verify --root 0x5445... range.json
    python -m memproof recompute range.json new_bytes.bin

Options:
    --env          Memory layout preset, 'prod' or 'test' (default: MEMPROOF_ENV)
    -v, --verbose  Enable debug logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from memproof.config import MEMPROOF_ENV
from memproof.memory import (
    PROD_MEMORY_SCHEME,
    TEST_MEMORY_SCHEME,
    ContextProof,
    MemoryCommitmentScheme,
)
from memproof.types import Bytes32, MemoryProofError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def select_scheme(env: str) -> MemoryCommitmentScheme:
    """Return the scheme for a preset name."""
    return TEST_MEMORY_SCHEME if env == "test" else PROD_MEMORY_SCHEME


def load_context_proof(path: Path) -> ContextProof:
    """Read a `{context, proof}` JSON document."""
    return ContextProof.model_validate_json(path.read_text())


def cmd_root(scheme: MemoryCommitmentScheme, args: argparse.Namespace) -> int:
    """Print the root of a memory image."""
    memory = args.memory.read_bytes()
    root = scheme.compute_root(memory)
    logger.info("Committed %d bytes", len(memory))
    print("0x" + root.hex())
    return 0


def cmd_context(scheme: MemoryCommitmentScheme, args: argparse.Namespace) -> int:
    """Print the context and proof of a range as JSON."""
    memory = args.memory.read_bytes()
    context, proof = scheme.build_context(memory, args.offset, args.length)
    print(ContextProof(context=context, proof=proof).model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_verify(scheme: MemoryCommitmentScheme, args: argparse.Namespace) -> int:
    """Check a context and proof against a root; exit status 1 on mismatch."""
    bundle = load_context_proof(args.context)
    if scheme.verify(Bytes32(args.root), bundle.context, bundle.proof):
        print("valid")
        return 0
    print("invalid")
    return 1


def cmd_recompute(scheme: MemoryCommitmentScheme, args: argparse.Namespace) -> int:
    """Print the root after writing new bytes to the proven range."""
    bundle = load_context_proof(args.context)
    new_root = scheme.recompute(bundle.context, bundle.proof, args.data.read_bytes())
    print("0x" + new_root.hex())
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="memproof",
        description="Streaming Merkle commitments to VM memory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--env",
        choices=["prod", "test"],
        default=MEMPROOF_ENV,
        help=f"Memory layout preset (default: {MEMPROOF_ENV})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    root = commands.add_parser("root", help="Compute the root of a memory image")
    root.add_argument("memory", type=Path, help="Path to the memory image")
    root.set_defaults(handler=cmd_root)

    context = commands.add_parser("context", help="Build the context and proof of a range")
    context.add_argument("memory", type=Path, help="Path to the full memory image")
    context.add_argument("--offset", type=int, required=True, help="First byte of the range")
    context.add_argument("--length", type=int, required=True, help="Number of bytes in the range")
    context.set_defaults(handler=cmd_context)

    verify = commands.add_parser("verify", help="Check a context and proof against a root")
    verify.add_argument("--root", required=True, help="Hex root the context must match")
    verify.add_argument("context", type=Path, help="Path to a context/proof JSON document")
    verify.set_defaults(handler=cmd_verify)

    recompute = commands.add_parser("recompute", help="Derive the root after a range mutation")
    recompute.add_argument("context", type=Path, help="Path to a context/proof JSON document")
    recompute.add_argument("data", type=Path, help="Path to the new bytes of the range")
    recompute.set_defaults(handler=cmd_recompute)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    scheme = select_scheme(args.env)
    try:
        return args.handler(scheme, args)
    except (MemoryProofError, ValueError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
