from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from txscope.config import settings
from txscope.core.errors import TxScopeError
from txscope.core.models import ChainKind
from txscope.core.registry import build_default_registry
from txscope.services.analysis_service import AnalysisService
from txscope.services.evm_analyzer import EvmAnalyzer
from txscope.services.solana_analyzer import SolanaAnalyzer
from txscope.io.output_writer import analysis_to_json, chains_to_json, write_analysis_json

from txscope.adapters.source.evm_rpc_adapter import EvmRpcAdapter
from txscope.adapters.source.solana_rpc_adapter import SolanaRpcAdapter

EXIT_CLIENT_ERROR = 2
EXIT_RETRYABLE = 3
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="txscope", description="Explain what a transaction did and what it cost (EVM + Solana)")
    p.add_argument(
        "--log-level",
        type=str.upper,
        default=settings.LOG_LEVEL.upper(),
        choices=LOG_LEVELS,
        help="Logging level",
    )
    sub = p.add_subparsers(dest="command", required=True)

    chains = sub.add_parser("chains", help="List supported chains and networks")
    chains.add_argument("--kind", choices=[k.value for k in ChainKind], help="Only list chains of this kind")

    evm = sub.add_parser("evm", help="Analyze an EVM transaction")
    evm.add_argument("chain", help="Chain key, e.g. ethereum, base, polygon")
    evm.add_argument("tx_hash", help="Transaction hash (0x + 64 hex chars)")
    evm.add_argument("--out", help="Write JSON to this file instead of stdout")
    evm.add_argument("--link", action="store_true", help="Print the explorer link to stderr")

    sol = sub.add_parser("solana", help="Analyze a Solana transaction")
    sol.add_argument("network", help="Network key, e.g. solana, solana-devnet")
    sol.add_argument("signature", help="Base58 transaction signature")
    sol.add_argument("--out", help="Write JSON to this file instead of stdout")
    sol.add_argument("--link", action="store_true", help="Print the explorer link to stderr")

    any_ = sub.add_parser("analyze", help="Analyze a transaction on any supported chain")
    any_.add_argument("chain", help="Chain or network key")
    any_.add_argument("reference", help="Transaction hash or signature")
    any_.add_argument("--out", help="Write JSON to this file instead of stdout")
    any_.add_argument("--link", action="store_true", help="Print the explorer link to stderr")
    return p


def build_service() -> AnalysisService:
    registry = build_default_registry()
    evm = EvmAnalyzer(registry, EvmRpcAdapter())
    solana = SolanaAnalyzer(registry, SolanaRpcAdapter(), commitment=settings.SOLANA_COMMITMENT)
    return AnalysisService(registry, evm=evm, solana=solana)


def _report_error(exc: TxScopeError) -> int:
    print(f"{exc.__class__.__name__}: {exc}", file=sys.stderr)
    return EXIT_RETRYABLE if exc.retryable else EXIT_CLIENT_ERROR


def main(argv: Optional[List[str]] = None, service: Optional[AnalysisService] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    svc = service or build_service()

    if args.command == "chains":
        kind = ChainKind(args.kind) if args.kind else None
        print(chains_to_json(svc.supported_chains(kind)))
        return 0

    try:
        if args.command == "evm":
            analysis = svc.evm.analyze(args.chain, args.tx_hash)
            link = svc.evm.explorer_link(args.chain, args.tx_hash) if args.link else None
        elif args.command == "solana":
            analysis = svc.solana.analyze(args.network, args.signature)
            link = svc.solana.explorer_link(args.network, args.signature) if args.link else None
        else:
            analysis = svc.analyze(args.chain, args.reference)
            link = svc.explorer_link(args.chain, args.reference) if args.link else None
    except TxScopeError as exc:
        return _report_error(exc)

    if link:
        print(link, file=sys.stderr)

    if args.out:
        path = write_analysis_json(analysis, args.out)
        print(f"Wrote: {path}")
    else:
        print(analysis_to_json(analysis))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
