"""Render the JavaScript spliced into the agent CLI bundle.

The output is minified by hand to match the surrounding bundle and calls the
host's own exec helper and logger, resolved through an
:class:`~zpatch.engine.extract.IdentifierBundle`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .extract import IdentifierBundle

# Every top-level or block-level name the fragments introduce.
GENERATED_NAMES: tuple[str, ...] = (
    "isInsideZellijSync",
    "isInsideZellij",
    "isZellijAvailable",
    "zellijLockQueue",
    "acquireZellijLock",
    "zellijBackendRegistered",
    "registerZellijBackend",
    "createZellijBackend",
    "ZellijBackendImpl",
    "zellijBackend",
    "zellijAvailable",
)

REGISTRATION_MARKER = "registerZellijBackend(ZellijBackendImpl);"


@dataclass(slots=True, frozen=True)
class GeneratedFragments:
    """Opaque text blocks ready for splicing."""

    detection: str
    backend: str
    cascade_branch: str
    fallback_branch: str
    dispatch_case: str
    in_process_conjunct: str

    @property
    def capability(self) -> str:
        return f"{self.detection}\n{self.backend}\n"


def find_name_collisions(text: str) -> list[str]:
    """Return generated names that already occur as identifiers in ``text``."""

    return [
        name for name in GENERATED_NAMES if re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", text)
    ]


def _render_detection(bundle: IdentifierBundle) -> str:
    run = bundle.exec_helper
    return "\n".join(
        [
            'function isInsideZellijSync(){return process.env.ZELLIJ==="0"&&!!process.env.ZELLIJ_SESSION_NAME}',
            "async function isInsideZellij(){return isInsideZellijSync()}",
            f'async function isZellijAvailable(){{try{{return(await {run}("which",["zellij"])).code===0}}catch{{return!1}}}}',
        ]
    )


def _render_backend(bundle: IdentifierBundle, pane_init_delay_ms: int) -> str:
    run = bundle.exec_helper
    log = bundle.logger
    lock = "".join(
        [
            "var zellijLockQueue=Promise.resolve();",
            "function acquireZellijLock(){let r,n=new Promise((z)=>{r=z}),p=zellijLockQueue;",
            "zellijLockQueue=n;return p.then(()=>r)}",
        ]
    )
    registry = "\n".join(
        [
            "var zellijBackendRegistered=null;",
            "function registerZellijBackend(A){zellijBackendRegistered=A}",
            'function createZellijBackend(){if(!zellijBackendRegistered)throw Error("ZellijBackend not registered.");'
            "return new zellijBackendRegistered}",
        ]
    )
    # The lock spans createTeammatePaneInSwarmView and sendCommandToPane:
    # write-chars targets whichever pane holds focus.
    cls = "".join(
        [
            'class ZellijBackendImpl{type="zellij";displayName="Zellij";supportsHideShow=!1;paneCount=0;_pendingRelease=null;',
            "async isAvailable(){return isInsideZellijSync()||await isZellijAvailable()}",
            "async isRunningInside(){return isInsideZellij()}",
            "_releaseLock(){let r=this._pendingRelease;this._pendingRelease=null;if(r)r()}",
            "async createTeammatePaneInSwarmView(A,q){",
            "this._pendingRelease=await acquireZellijLock();",
            "try{let z=this.paneCount===0;this.paneCount++;",
            'let H="zellij-"+A+"-"+this.paneCount;',
            f'let $=await {run}("zellij",["action","new-pane","--name",A]);',
            'if($.code!==0)throw Error("Failed to create Zellij pane for "+A+": "+$.stderr);',
            f'{log}("[ZellijBackend] Created pane for "+A+": "+H+", isFirst="+z);',
            f"await new Promise((O)=>setTimeout(O,{int(pane_init_delay_ms)}));",
            "return{paneId:H,isFirstTeammate:z}",
            "}catch(z){this._releaseLock();throw z}}",
            "async sendCommandToPane(A,q,K){",
            f'try{{let Y=await {run}("zellij",["action","write-chars",q]);',
            'if(Y.code!==0)throw Error("Failed to write to Zellij pane "+A+": "+Y.stderr);',
            f'let z=await {run}("zellij",["action","write","13"]);',
            'if(z.code!==0)throw Error("Failed to send Enter to Zellij pane "+A+": "+z.stderr);',
            f'{log}("[ZellijBackend] Sent command to pane "+A)',
            "}finally{this._releaseLock()}}",
            "async setPaneBorderColor(A,q,K){}",
            "async setPaneTitle(A,q,K,Y){}",
            "async enablePaneBorderStatus(A,q){}",
            f'async rebalancePanes(A,q){{{log}("[ZellijBackend] rebalancePanes: no-op")}}',
            f'async killPane(A,q){{{log}("[ZellijBackend] killPane "+A+": best-effort");return!0}}',
            "async hidePane(A,q){return!1}",
            "async showPane(A,q,K){return!1}}",
        ]
    )
    return "\n".join([lock, registry, cls, REGISTRATION_MARKER])


def _render_selection(bundle: IdentifierBundle, *, native: bool) -> str:
    flag = "!0" if native else "!1"
    return (
        "let zellijBackend=createZellijBackend();"
        f"return {bundle.backend_cache}=zellijBackend,"
        f"{bundle.selection_cache}={{backend:zellijBackend,isNative:{flag},needsIt2Setup:!1}},"
        f"{bundle.selection_cache}"
    )


def render_fragments(bundle: IdentifierBundle, *, pane_init_delay_ms: int = 200) -> GeneratedFragments:
    """Render every fragment the edits splice into the bundle."""

    log = bundle.logger
    cascade_branch = (
        "if(isInsideZellijSync()){"
        f'{log}("[BackendRegistry] Selected: zellij (running inside Zellij session)");'
        f"{_render_selection(bundle, native=True)}}}"
    )
    fallback_branch = (
        "{let zellijAvailable=await isZellijAvailable();"
        f'if({log}("[BackendRegistry] Checking zellij availability: "+zellijAvailable),zellijAvailable){{'
        f'{log}("[BackendRegistry] Selected: zellij (external)");'
        f"{_render_selection(bundle, native=False)}}}}}"
    )
    return GeneratedFragments(
        detection=_render_detection(bundle),
        backend=_render_backend(bundle, pane_init_delay_ms),
        cascade_branch=cascade_branch,
        fallback_branch=fallback_branch,
        dispatch_case=';case"zellij":return createZellijBackend()',
        in_process_conjunct="&&!isInsideZellijSync()",
    )


__all__ = ["GENERATED_NAMES", "GeneratedFragments", "REGISTRATION_MARKER", "find_name_collisions", "render_fragments"]
