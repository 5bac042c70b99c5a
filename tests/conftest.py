from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from zpatch.engine.anchors import MESSAGE_REPLACEMENTS  # noqa: E402

MESSAGES: tuple[str, ...] = tuple(find for find, _ in MESSAGE_REPLACEMENTS)

# Minified stand-in for the pane-backend layer of cli.js. Names are the
# mangled ones a real build would carry.
_HOST_PARTS = (
    '"use strict";var qW1=null,ER=null;',
    'async function CA(A,q,K){return{stdout:"",stderr:"",code:0}}',
    "function h(A){return Error(A)}",
    'async function Ts(){try{return(await CA("tmux",["-V"])).code===0}catch{return!1}}',
    "function Ws(){return!!process.env.TMUX}",
    'function Is(){return process.env.TERM_PROGRAM==="iTerm.app"}',
    'class LTA{type="tmux";displayName="tmux";supportsHideShow=!0;'
    'async killPane(A){h("[TmuxBackend] killPane "+A);return!0}}',
    'class IT2{type="iterm2";displayName="iTerm2"}',
    "function EM6(){return new LTA}",
    "function CI4(){return new IT2}",
    "async function Hx(){if(qW1)return ER;",
    'if(Ws()){h("[BackendRegistry] Selected: tmux (inside tmux)");let A=EM6();'
    "return qW1=A,ER={backend:A,isNative:!0,needsIt2Setup:!1},ER}",
    'if(Is()){h("[BackendRegistry] Selected: iterm2");let A=CI4();'
    "return qW1=A,ER={backend:A,isNative:!0,needsIt2Setup:!0},ER}",
    "let K=await Ts();if(h(`[BackendRegistry] Not in tmux or iTerm2, tmux available: ${K}`),K){"
    'h("[BackendRegistry] Selected: tmux (external)");let A=EM6();'
    "return qW1=A,ER={backend:A,isNative:!1,needsIt2Setup:!1},ER}",
    'throw h("[BackendRegistry] ERROR: No pane backend available"),Error("No pane backend")}',
    'function Gb(A){switch(A){case"tmux":return EM6();case"iterm2":return CI4()}}',
    'function Pz(){let w=!Ws()&&!Is();if(h("[TeammateSpawn] Using in-process teammates: "+w),w)return!0;return!1}',
)


def build_host(messages: Sequence[str] = MESSAGES) -> str:
    """Assemble the fixture bundle with the given user-facing messages."""

    listed = ",".join(f'"{message}"' for message in messages)
    return "\n".join([*_HOST_PARTS, f"var Mx=[{listed}];"]) + "\n"


@dataclass(slots=True)
class HostFile:
    """Fixture payload describing a cli.js written to disk."""

    path: Path
    original: str

    @property
    def backup(self) -> Path:
        return self.path.with_name(self.path.name + ".bak")


@pytest.fixture()
def make_host():
    return build_host


@pytest.fixture()
def host_source() -> str:
    return build_host()


@pytest.fixture()
def host_file(tmp_path: Path, host_source: str) -> HostFile:
    target = tmp_path / "claude-code" / "cli.js"
    target.parent.mkdir(parents=True)
    target.write_text(host_source, encoding="utf-8")
    return HostFile(path=target, original=host_source)
