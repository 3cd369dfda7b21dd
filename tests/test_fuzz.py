from __future__ import annotations

import os

import pytest

from markline.inline import InlineRewriter
from markline.parser import convert
from markline.renderers import Renderer

atheris = pytest.importorskip("atheris")


def test_convert_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    converted = 0

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(256)
        assert isinstance(convert(text, keywords=True), str)
        converted += 1

    assert converted  # ensure we exercised the loop


def test_inline_identity_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    rewriter = InlineRewriter(Renderer(), keywords=True)

    while provider.remaining_bytes() > 0:
        text = provider.ConsumeUnicodeNoSurrogates(64)
        assert rewriter.rewrite(text) == text
