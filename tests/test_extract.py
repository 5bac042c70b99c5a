from __future__ import annotations

import pytest

from zpatch.engine.errors import ExtractionFailed
from zpatch.engine.extract import IDENTIFIER_RULES, IdentifierBundle, extract_identifiers


def test_extract_identifiers_resolves_every_role(host_source: str) -> None:
    bundle = extract_identifiers(host_source)

    assert bundle == IdentifierBundle(
        backend_class="LTA",
        tmux_factory="EM6",
        iterm2_factory="CI4",
        logger="h",
        exec_helper="CA",
        backend_cache="qW1",
        selection_cache="ER",
    )


def test_extract_identifiers_follows_renamed_tokens(host_source: str) -> None:
    renamed = (
        host_source.replace("LTA", "Zq$")
        .replace("qW1", "a9")
        .replace("CA(", "$x(")
    )

    bundle = extract_identifiers(renamed)

    assert bundle.backend_class == "Zq$"
    assert bundle.backend_cache == "a9"
    assert bundle.exec_helper == "$x"


@pytest.mark.parametrize("rule", IDENTIFIER_RULES, ids=lambda rule: "+".join(rule.roles))
def test_missing_anchor_fails_whole_extraction(host_source: str, rule) -> None:
    broken = host_source.replace(rule.anchor, "")

    with pytest.raises(ExtractionFailed) as exc_info:
        extract_identifiers(broken)

    assert set(rule.roles) <= set(exc_info.value.missing)
    assert "not present" in exc_info.value.missing[rule.roles[0]]


def test_anchor_with_unexpected_shape_is_reported(host_source: str) -> None:
    reshaped = host_source.replace('case"tmux":return EM6();case"iterm2"', 'case"tmux":return EM6(!0);case"iterm2"')

    with pytest.raises(ExtractionFailed) as exc_info:
        extract_identifiers(reshaped)

    assert set(exc_info.value.missing) == {"tmux_factory", "iterm2_factory"}
    assert "unexpected shape" in exc_info.value.missing["tmux_factory"]
