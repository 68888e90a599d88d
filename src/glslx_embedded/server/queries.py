"""Editor queries answered from the cached build.

Every query first routes the cursor to a fragment; positions are passed
to the compiler unchanged because projections keep the document's line
and column layout.
"""

from __future__ import annotations

from collections import defaultdict

from lsprotocol import types as lsp

from glslx_embedded.build.documents import DocumentStore
from glslx_embedded.build.router import PositionRouter
from glslx_embedded.build.schemas import CompiledFragment
from glslx_embedded.compiler.protocols import Compiler
from glslx_embedded.compiler.schemas import FormatOptions, SourceRange
from glslx_embedded.server.convert import (
    code_block,
    markdown,
    to_completion_item,
    to_range,
    to_signature_help,
    to_symbol_information,
)


def target_uri(fragment: CompiledFragment, rng: SourceRange) -> str:
    """Document URI a compiler range points into.

    Ranges in the fragment's own virtual source map back to its document;
    ranges in included files carry that file's URI as their source.
    """
    if rng.source is None or rng.source == fragment.id:
        return fragment.document_uri
    return rng.source


class QueryService:
    def __init__(
        self,
        store: DocumentStore,
        router: PositionRouter,
        compiler: Compiler,
        *,
        language_id: str,
    ) -> None:
        self._store = store
        self._router = router
        self._compiler = compiler
        self._language = language_id

    def locate(
        self, uri: str, position: lsp.Position
    ) -> CompiledFragment | None:
        doc = self._store.get(uri)
        if doc is None:
            return None
        offset = doc.offset_at(position.line, position.character)
        return self._router.locate(uri, offset)

    async def hover(
        self, uri: str, position: lsp.Position
    ) -> lsp.Hover | None:
        fragment = self.locate(uri, position)
        if fragment is None:
            return None
        tooltip = await fragment.analysis.tooltip(
            position.line, position.character
        )
        if tooltip is None:
            return None
        return lsp.Hover(
            contents=markdown(
                code_block(
                    self._language, tooltip.tooltip, tooltip.documentation
                )
            ),
            range=to_range(tooltip.range),
        )

    async def definition(
        self, uri: str, position: lsp.Position
    ) -> lsp.Location | None:
        fragment = self.locate(uri, position)
        if fragment is None:
            return None
        rng = await fragment.analysis.definition(
            position.line, position.character
        )
        if rng is None:
            return None
        return lsp.Location(uri=target_uri(fragment, rng), range=to_range(rng))

    async def document_symbols(
        self, uri: str
    ) -> list[lsp.SymbolInformation] | None:
        fragments = self._router.fragments(uri)
        if fragments is None:
            return None
        symbols: list[lsp.SymbolInformation] = []
        for fragment in fragments:
            found = await fragment.analysis.symbols()
            for symbol in found or ():
                if target_uri(fragment, symbol.range) != uri:
                    continue
                symbols.append(to_symbol_information(symbol, uri))
        return symbols

    async def rename(
        self, uri: str, position: lsp.Position, new_name: str
    ) -> lsp.WorkspaceEdit | None:
        fragment = self.locate(uri, position)
        if fragment is None:
            return None
        ranges = await fragment.analysis.rename(
            position.line, position.character
        )
        if ranges is None:
            return None

        edits: dict[str, list[lsp.TextEdit]] = defaultdict(list)
        for rng in ranges:
            edits[target_uri(fragment, rng)].append(
                lsp.TextEdit(range=to_range(rng), new_text=new_name)
            )

        changes: list[lsp.TextDocumentEdit] = []
        for edit_uri, text_edits in edits.items():
            doc = self._store.get(edit_uri)
            changes.append(
                lsp.TextDocumentEdit(
                    text_document=lsp.OptionalVersionedTextDocumentIdentifier(
                        uri=edit_uri,
                        version=None if doc is None else doc.version,
                    ),
                    edits=list(text_edits),
                )
            )
        return lsp.WorkspaceEdit(document_changes=changes)

    async def completion(
        self, uri: str, position: lsp.Position
    ) -> list[lsp.CompletionItem] | None:
        fragment = self.locate(uri, position)
        if fragment is None:
            return None
        completions = await fragment.analysis.completions(
            position.line, position.character
        )
        if completions is None:
            return None
        return [to_completion_item(c, self._language) for c in completions]

    async def signature_help(
        self, uri: str, position: lsp.Position
    ) -> lsp.SignatureHelp | None:
        fragment = self.locate(uri, position)
        if fragment is None:
            return None
        help_ = await fragment.analysis.signature(
            position.line, position.character
        )
        return None if help_ is None else to_signature_help(help_)

    async def format(
        self, uri: str, options: lsp.FormattingOptions
    ) -> list[lsp.TextEdit]:
        """One whole-document edit for standalone shader documents.

        Host documents with embedded fragments are left alone: the
        formatter only understands the shader language.
        """
        doc = self._store.get(uri)
        if doc is None or doc.language_id != self._language:
            return []

        fmt = FormatOptions(
            indent=(
                " " * (options.tab_size or 2)
                if options.insert_spaces
                else "\t"
            ),
            newline="\n",
            trailing_newline="insert",
        )
        output = await self._compiler.format(doc.text, fmt)
        if output == doc.text:
            return []

        end_line, end_character = doc.end_position()
        return [
            lsp.TextEdit(
                range=lsp.Range(
                    start=lsp.Position(line=0, character=0),
                    end=lsp.Position(line=end_line, character=end_character),
                ),
                new_text=output,
            )
        ]
