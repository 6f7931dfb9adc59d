from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from txscope.core.models import ChainDescriptor, TransactionAnalysis
from txscope.io.schemas import analysis_to_dict, chain_to_dict


def analysis_to_json(analysis: TransactionAnalysis) -> str:
    return json.dumps(analysis_to_dict(analysis), indent=2)


def chains_to_json(chains: Iterable[ChainDescriptor]) -> str:
    return json.dumps([chain_to_dict(c) for c in chains], indent=2)


def write_analysis_json(analysis: TransactionAnalysis, out_path: str) -> str:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        f.write(analysis_to_json(analysis))
        f.write("\n")
    return str(p)
