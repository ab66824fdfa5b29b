from __future__ import annotations

"""
A minimal pygls-based Language Server for Sloth Lisp.

Features:
- Initialize/Shutdown/Exit
- Text synchronization and document store
- Diagnostics: read errors from the real reader, at their position
- Hover: builtin docstrings and locally defined symbols with their docstrings
- Completion: locals, builtins
- Document Symbols: from indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from typing import Dict, Optional, List
from dataclasses import dataclass

from pygls.server import LanguageServer
from lsprotocol.types import (
    InitializeParams,
    InitializeResult,
    TextDocumentSyncKind,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
    Hover,
    MarkupContent,
    MarkupKind,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    HoverParams,
    DocumentSymbolParams,
    DocumentSymbol,
    SymbolKind,
)

from sloth_lsp.indexer import build_index, BUILTIN_SIGNATURES, DocumentIndex

logger = logging.getLogger(__name__)

SYMBOL_KINDS = {
    "function": SymbolKind.Function,
    "macro": SymbolKind.Operator,
    "var": SymbolKind.Variable,
}


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class SlothLanguageServer(LanguageServer):
    CMD_NAME = "sloth-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, "v0.3")
        self.documents: Dict[str, DocumentState] = {}


ls = SlothLanguageServer()


@ls.feature("initialize")
def on_initialize(params: InitializeParams):
    return InitializeResult(
        capabilities={
            "textDocumentSync": TextDocumentSyncKind.Full,
            "hoverProvider": True,
            "completionProvider": {"resolveProvider": False, "triggerCharacters": ["("]},
            "documentSymbolProvider": True,
        }
    )


@ls.feature("shutdown")
def on_shutdown(*_):
    return None


@ls.feature("exit")
def on_exit(*_):
    return None


# --- Text sync ---
@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    text = params.text_document.text or ""
    _update(uri, text)


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents.get(uri, DocumentState("", build_index(""))).text
    _update(uri, text)


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    if uri in ls.documents:
        del ls.documents[uri]
    ls.publish_diagnostics(uri, [])


def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d definition(s)", uri, len(idx.symbols))
    ls.publish_diagnostics(uri, diagnostics_for(idx))


# --- Diagnostics ---
def _mk_range(line: int, col: int, width: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + width))


def diagnostics_for(idx: DocumentIndex) -> List[Diagnostic]:
    return [
        Diagnostic(
            range=_mk_range(problem.line, problem.col),
            message=f"read-error: {problem.message}",
            severity=DiagnosticSeverity.Error,
            source="sloth-ls",
        )
        for problem in idx.problems
    ]


# --- Hover ---
def hover_text(word: str, idx: DocumentIndex) -> Optional[str]:
    if word in idx.symbols:
        sdef = idx.symbols[word]
        text = f"{word}: {sdef.kind} (defined at {sdef.line+1}:{sdef.col+1})"
        if sdef.doc:
            text += f"\n\n{sdef.doc}"
        return text
    if word in BUILTIN_SIGNATURES:
        return f"{word}: builtin\n\n{BUILTIN_SIGNATURES[word]}"
    return None


@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    if not state:
        return None

    word = extract_word_at(state.text, params.position.line, params.position.character)
    if not word:
        return None

    contents = hover_text(word, state.index)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(idx: DocumentIndex) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, doc in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=doc))
    for name, sdef in idx.symbols.items():
        kind = CompletionItemKind.Variable if sdef.kind == "var" else CompletionItemKind.Function
        items.append(CompletionItem(label=name, kind=kind, detail=sdef.doc))
    return items


@ls.feature("textDocument/completion")
def on_completion(params: CompletionParams) -> CompletionList:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    if not state:
        return CompletionList(is_incomplete=False, items=[])
    return CompletionList(is_incomplete=False, items=completion_items(state.index))


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SYMBOL_KINDS.get(sdef.kind, SymbolKind.Function),
                range=rng,
                selection_range=rng,
                detail=sdef.doc,
            )
        )
    return symbols


# --- Helpers ---

def extract_word_at(text: str, line_no: int, character: int) -> Optional[str]:
    lines = text.splitlines(True)
    if line_no >= len(lines):
        return None
    line = lines[line_no]
    # expand to word boundaries (letters, digits, -, ?, !, >, etc.)
    start = character
    while start > 0 and line[start - 1] not in " \t()'`,\n\r":
        start -= 1
    end = character
    while end < len(line) and line[end] not in " \t()'`,\n\r":
        end += 1
    word = line[start:end]
    return word or None


def main():
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
