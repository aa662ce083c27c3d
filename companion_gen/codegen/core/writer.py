"""
Indentation-aware source emitter.

SourceFileWriter is a forward-only cursor over a text stream. Callers issue
paired ``start`` / element / ``end`` calls; every open construct (class
header, class body, parameter list, argument list, method body, loop, open
statement) is a frame on an explicit stack, so a call made in the wrong place
raises EmitterProtocolError instead of producing text that does not compile.
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, TextIO, Union

from .model import Modifier, sort_modifiers

ModifierLike = Union[str, Modifier]


class EmitterProtocolError(RuntimeError):
    """Raised when start/end calls are unbalanced or made out of order."""

    pass


class Context(Enum):
    """Constructs the writer can be inside of."""

    CLASS_HEADER = "class header"
    CLASS_BODY = "class body"
    INTERFACE_BODY = "interface body"
    PARAMETERS = "parameter list"
    ARGUMENTS = "argument list"
    METHOD_BODY = "method body"
    LOOP = "loop body"
    STATEMENT = "statement"


_BODY_CONTEXTS = (Context.METHOD_BODY, Context.LOOP)
_DECLARATION_CONTEXTS = (Context.CLASS_BODY, Context.INTERFACE_BODY)


@dataclass
class _Frame:
    context: Context
    label: str = ""
    indent: int = 0
    first: bool = True
    inline: bool = False
    abstract: bool = False
    extended: bool = False
    implemented: bool = False


class SourceFileWriter:
    """Writes brace-delimited, statement-terminated source text."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        indent_width: int = 4,
        line_ending: str = "\n",
        generated_annotation: Optional[str] = "javax.annotation.Generated",
    ):
        """
        Create a writer.

        Args:
            stream: Text stream to write to; an in-memory buffer when omitted
            indent_width: Number of spaces per indentation level
            line_ending: Line terminator to emit
            generated_annotation: Annotation type used to record provenance on
                class and interface declarations, or None to omit it
        """
        self._stream = stream if stream is not None else io.StringIO()
        self._owns_buffer = stream is None
        self.indent_width = indent_width
        self.eol = line_ending
        self.generated_annotation = generated_annotation
        self._indent = 0
        self._stack: List[_Frame] = []

    # ------------------------------------------------------------------
    # State

    @property
    def depth(self) -> int:
        """Current indentation level."""
        return self._indent

    @property
    def open_contexts(self) -> List[Context]:
        """Open constructs, outermost first."""
        return [frame.context for frame in self._stack]

    def is_balanced(self) -> bool:
        return not self._stack

    def ensure_balanced(self) -> None:
        """Raise if any construct is still open."""
        if self._stack:
            still_open = ", ".join(
                f"{f.context.value} {f.label}".strip() for f in self._stack
            )
            raise EmitterProtocolError(f"Unclosed constructs: {still_open}")

    def getvalue(self) -> str:
        """Return everything written so far to the in-memory buffer."""
        if not self._owns_buffer:
            raise EmitterProtocolError("getvalue() needs a writer that owns its buffer")
        self.ensure_balanced()
        return self._stream.getvalue()

    def close(self) -> None:
        """Close the underlying stream."""
        if not self._stream.closed:
            self._stream.close()

    def __enter__(self) -> "SourceFileWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # File level

    def write_package_declaration(self, package_name: Optional[str]) -> "SourceFileWriter":
        """Write ``package x.y;`` unless the package is empty."""
        self._require_level("write_package_declaration", None)
        if package_name:
            self._write_indent()
            self.write(f"package {package_name};").write(self.eol).write(self.eol)
        return self

    def write_header_comment(self, text: str) -> "SourceFileWriter":
        """Write a block comment, one `` * `` line per line of ``text``."""
        self._require_level("write_header_comment", None, *_DECLARATION_CONTEXTS)
        self._write_indent()
        self.write("/*").write(self.eol)
        for line in text.splitlines():
            self._write_indent()
            self.write(f" * {line}".rstrip()).write(self.eol)
        self._write_indent()
        self.write(" */").write(self.eol)
        return self

    def write_annotation(self, annotation: str) -> "SourceFileWriter":
        """Write an annotation on its own line before a declaration."""
        self._require_level("write_annotation", None, *_DECLARATION_CONTEXTS)
        self._write_indent()
        self.write(annotation).write(self.eol)
        return self

    def write_annotation_if(self, annotation: str, condition: bool) -> "SourceFileWriter":
        if condition:
            self.write_annotation(annotation)
        return self

    # ------------------------------------------------------------------
    # Classes and interfaces

    def write_class_declaration(
        self,
        class_name: str,
        provenance: Optional[str] = None,
        modifiers: Iterable[ModifierLike] = (),
    ) -> "SourceFileWriter":
        """Write a complete class header and open its body."""
        self.write_class_declaration_start(class_name, provenance, modifiers)
        return self.write_class_declaration_end()

    def write_class_declaration_start(
        self,
        class_name: str,
        provenance: Optional[str] = None,
        modifiers: Iterable[ModifierLike] = (),
    ) -> "SourceFileWriter":
        """
        Start a class header.

        May be followed by write_class_extends_declaration and
        write_class_implements_declaration, then write_class_declaration_end.
        """
        self._require_level("write_class_declaration_start", None, Context.CLASS_BODY)
        self._write_generated(provenance)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"class {class_name}")
        self._push(Context.CLASS_HEADER, label=class_name)
        return self

    def write_class_extends_declaration(self, name: str) -> "SourceFileWriter":
        frame = self._require("write_class_extends_declaration", Context.CLASS_HEADER)
        if frame.extended:
            raise EmitterProtocolError(f"Class {frame.label} already extends a type")
        if frame.implemented:
            raise EmitterProtocolError("extends must be written before implements")
        frame.extended = True
        self.write(f" extends {name}")
        return self

    def write_class_implements_declaration(self, *names: str) -> "SourceFileWriter":
        frame = self._require(
            "write_class_implements_declaration", Context.CLASS_HEADER
        )
        if frame.implemented:
            raise EmitterProtocolError(
                f"Class {frame.label} already has an implements clause"
            )
        if names:
            frame.implemented = True
            self.write(" implements ").write(", ".join(names))
        return self

    def write_class_declaration_end(self) -> "SourceFileWriter":
        frame = self._pop("write_class_declaration_end", Context.CLASS_HEADER)
        self.write(" {").write(self.eol).write(self.eol)
        self._push(Context.CLASS_BODY, label=frame.label, indent=1)
        return self

    def write_interface_declaration(
        self,
        name: str,
        provenance: Optional[str] = None,
        modifiers: Iterable[ModifierLike] = (),
        extends: Iterable[str] = (),
    ) -> "SourceFileWriter":
        """Write an interface header and open its body."""
        self._require_level("write_interface_declaration", None, Context.CLASS_BODY)
        self._write_generated(provenance)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"interface {name}")
        extends = list(extends)
        if extends:
            self.write(" extends ").write(", ".join(extends))
        self.write(" {").write(self.eol).write(self.eol)
        self._push(Context.INTERFACE_BODY, label=name, indent=1)
        return self

    def write_block_end(self) -> "SourceFileWriter":
        """Close a method, constructor or class body."""
        self._pop("write_block_end", Context.METHOD_BODY, Context.CLASS_BODY)
        self._write_indent()
        self.write("}").write(self.eol).write(self.eol)
        return self

    def write_interface_block_end(self) -> "SourceFileWriter":
        self._pop("write_interface_block_end", Context.INTERFACE_BODY)
        self._write_indent()
        self.write("}").write(self.eol).write(self.eol)
        return self

    # ------------------------------------------------------------------
    # Members

    def write_field(
        self,
        type_name: str,
        name: str,
        modifiers: Iterable[ModifierLike] = (),
        value: Optional[str] = None,
    ) -> "SourceFileWriter":
        self._require("write_field", Context.CLASS_BODY)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"{type_name} {name}")
        if value is not None:
            self.write(f" = {value}")
        self.write(";").write(self.eol).write(self.eol)
        return self

    def write_constructor_declaration_start(
        self, name: str, modifiers: Iterable[ModifierLike] = ()
    ) -> "SourceFileWriter":
        """
        Start a constructor declaration.

        Follow with zero or more write_method_parameter calls and a single
        write_method_declaration_end.
        """
        self._require("write_constructor_declaration_start", Context.CLASS_BODY)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"{name}(")
        self._push(Context.PARAMETERS, label=name, indent=2)
        return self

    def write_method_declaration_start(
        self,
        return_type: str,
        name: str,
        modifiers: Iterable[ModifierLike] = (),
    ) -> "SourceFileWriter":
        """
        Start a method declaration.

        Follow with zero or more write_method_parameter calls and then
        write_method_declaration_end, or write_interface_method_declaration_end
        for a method without a body.
        """
        owner = self._require(
            "write_method_declaration_start", *_DECLARATION_CONTEXTS
        )
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"{return_type} {name}(")
        self._push(
            Context.PARAMETERS,
            label=name,
            indent=2,
            abstract=owner.context == Context.INTERFACE_BODY,
        )
        return self

    def write_method_parameter(
        self,
        annotations: Union[str, Iterable[str]],
        type_name: str,
        name: str,
        modifiers: Iterable[ModifierLike] = (),
    ) -> "SourceFileWriter":
        """Write one parameter on its own continuation line."""
        frame = self._require("write_method_parameter", Context.PARAMETERS)
        if not frame.first:
            self.write(",")
        frame.first = False

        if not isinstance(annotations, str):
            annotations = " ".join(annotations)

        self.write(self.eol)
        self._write_indent()
        if annotations:
            self.write(annotations).write(" ")
        self._write_modifiers(modifiers)
        self.write(f"{type_name} {name}")
        return self

    def write_method_declaration_end(self, *throw_types: str) -> "SourceFileWriter":
        """Close the parameter list and open the method body."""
        frame = self._require("write_method_declaration_end", Context.PARAMETERS)
        if frame.abstract:
            raise EmitterProtocolError(
                f"{frame.label} is declared in an interface; "
                "use write_interface_method_declaration_end"
            )
        self.write(")")
        self._write_throws(throw_types)
        self.write(" {").write(self.eol)
        self._pop("write_method_declaration_end", Context.PARAMETERS)
        self._push(Context.METHOD_BODY, label=frame.label, indent=1)
        return self

    def write_interface_method_declaration_end(
        self, *throw_types: str
    ) -> "SourceFileWriter":
        """Close the parameter list of a method that has no body."""
        self._require("write_interface_method_declaration_end", Context.PARAMETERS)
        self.write(")")
        self._write_throws(throw_types)
        self.write(";").write(self.eol).write(self.eol)
        self._pop("write_interface_method_declaration_end", Context.PARAMETERS)
        return self

    # ------------------------------------------------------------------
    # Calls

    def write_super_constructor_start(self) -> "SourceFileWriter":
        """
        Start a ``super(...)`` call.

        Follow with write_method_call_parameter calls and write_method_call_end.
        """
        self._require("write_super_constructor_start", Context.METHOD_BODY)
        self._write_indent()
        self.write("super(")
        self._push(Context.ARGUMENTS, label="super")
        return self

    def write_super_method_start(self, name: str) -> "SourceFileWriter":
        return self._start_call("write_super_method_start", f"super.{name}")

    def write_method_call_start(self, name: str) -> "SourceFileWriter":
        return self._start_call("write_method_call_start", name)

    def write_method_call_parameter(self, value: str) -> "SourceFileWriter":
        frame = self._require("write_method_call_parameter", Context.ARGUMENTS)
        if not frame.first:
            self.write(", ")
        frame.first = False
        self.write(value)
        return self

    def write_method_call_end(self) -> "SourceFileWriter":
        """
        Close an argument list.

        A call started as a statement is terminated with ``;``; a call started
        inside an open statement is left for write_statement_end.
        """
        frame = self._pop("write_method_call_end", Context.ARGUMENTS)
        self.write(")")
        if not frame.inline:
            self.write(";").write(self.eol)
        return self

    def _start_call(self, operation: str, target: str) -> "SourceFileWriter":
        frame = self._require(operation, Context.STATEMENT, *_BODY_CONTEXTS)
        inline = frame.context == Context.STATEMENT
        if inline:
            frame.first = False
        else:
            self._write_indent()
        self.write(f"{target}(")
        self._push(Context.ARGUMENTS, label=target, inline=inline)
        return self

    # ------------------------------------------------------------------
    # Statements

    def write_declaration_start(
        self,
        type_name: str,
        name: str,
        modifiers: Iterable[ModifierLike] = (Modifier.FINAL,),
    ) -> "SourceFileWriter":
        """Start ``final T name = ...``; finish with write_statement_end."""
        self._require("write_declaration_start", *_BODY_CONTEXTS)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"{type_name} {name} = ")
        self._push(Context.STATEMENT, label=name)
        return self

    def write_declaration_and_assignment(
        self,
        type_name: str,
        name: str,
        value: str,
        modifiers: Iterable[ModifierLike] = (Modifier.FINAL,),
    ) -> "SourceFileWriter":
        self._require("write_declaration_and_assignment", *_BODY_CONTEXTS)
        self._write_indent()
        self._write_modifiers(modifiers)
        self.write(f"{type_name} {name} = {value};").write(self.eol)
        return self

    def write_assignment(self, target: str, value: str) -> "SourceFileWriter":
        self._require("write_assignment", *_BODY_CONTEXTS)
        self._write_indent()
        self.write(f"{target} = {value};").write(self.eol)
        return self

    def write_field_assignment(self, target: str, value: str) -> "SourceFileWriter":
        return self.write_assignment(f"this.{target}", value)

    def write_return_start(self) -> "SourceFileWriter":
        """Start ``return ...``; finish with write_statement_end."""
        self._require("write_return_start", *_BODY_CONTEXTS)
        self._write_indent()
        self.write("return ")
        self._push(Context.STATEMENT, label="return")
        return self

    def write_return(self, value: Optional[str] = None) -> "SourceFileWriter":
        self._require("write_return", *_BODY_CONTEXTS)
        self._write_indent()
        self.write("return" if value is None else f"return {value}")
        self.write(";").write(self.eol)
        return self

    def write_new_instance(self, name: str, *parameters: str) -> "SourceFileWriter":
        """Write ``new Name(...)`` inside an open statement, one argument per line."""
        frame = self._require("write_new_instance", Context.STATEMENT)
        if not frame.first:
            raise EmitterProtocolError(
                f"Statement {frame.label} already has an expression"
            )
        frame.first = False
        self.write(f"new {name}(")
        self._indent += 2
        for index, parameter in enumerate(parameters):
            if index > 0:
                self.write(",")
            self.write(self.eol)
            self._write_indent()
            self.write(parameter)
        self._indent -= 2
        self.write(")")
        return self

    def write_statement_end(self) -> "SourceFileWriter":
        self._pop("write_statement_end", Context.STATEMENT)
        self.write(";").write(self.eol)
        return self

    def write_new_for_loop_start(
        self,
        type_name: str,
        name: str,
        iterable: str,
        modifiers: Iterable[ModifierLike] = (Modifier.FINAL,),
    ) -> "SourceFileWriter":
        """Open an enhanced for loop; close it with write_for_loop_end."""
        self._require("write_new_for_loop_start", *_BODY_CONTEXTS)
        self._write_indent()
        self.write("for (")
        self._write_modifiers(modifiers)
        self.write(f"{type_name} {name} : {iterable}) {{").write(self.eol)
        self._push(Context.LOOP, label=name, indent=1)
        return self

    def write_for_loop_end(self) -> "SourceFileWriter":
        self._pop("write_for_loop_end", Context.LOOP)
        self._write_indent()
        self.write("}").write(self.eol)
        return self

    # ------------------------------------------------------------------
    # Raw output

    def write(self, string: str) -> "SourceFileWriter":
        """Write a string as-is."""
        self._stream.write(string)
        return self

    # ------------------------------------------------------------------
    # Internals

    def _write_indent(self) -> None:
        if self._indent:
            self.write(" " * (self._indent * self.indent_width))

    def _write_modifiers(self, modifiers: Iterable[ModifierLike]) -> None:
        for modifier in sort_modifiers(modifiers):
            self.write(f"{modifier} ")

    def _write_generated(self, provenance: Optional[str]) -> None:
        if provenance and self.generated_annotation:
            self._write_indent()
            self.write(f'@{self.generated_annotation}("{provenance}")').write(self.eol)

    def _write_throws(self, throw_types: Iterable[str]) -> None:
        throw_types = list(throw_types)
        if not throw_types:
            return
        self.write(" throws").write(self.eol)
        for index, thrown in enumerate(throw_types):
            if index > 0:
                self.write(",").write(self.eol)
            self._write_indent()
            self.write(thrown)

    def _top(self) -> Optional[_Frame]:
        return self._stack[-1] if self._stack else None

    def _require(self, operation: str, *contexts: Context) -> _Frame:
        top = self._top()
        if top is None or top.context not in contexts:
            found = top.context.value if top else "top level"
            expected = " or ".join(c.value for c in contexts)
            raise EmitterProtocolError(
                f"{operation}: expected {expected}, but the writer is at {found}"
            )
        return top

    def _require_level(self, operation: str, *contexts: Optional[Context]) -> None:
        """Like _require, where None stands for the top level of the file."""
        top = self._top()
        current = top.context if top else None
        if current not in contexts:
            found = current.value if current else "top level"
            expected = " or ".join(c.value if c else "top level" for c in contexts)
            raise EmitterProtocolError(
                f"{operation}: expected {expected}, but the writer is at {found}"
            )

    def _push(self, context: Context, indent: int = 0, **attributes) -> _Frame:
        frame = _Frame(context=context, indent=indent, **attributes)
        self._stack.append(frame)
        self._indent += indent
        return frame

    def _pop(self, operation: str, *contexts: Context) -> _Frame:
        frame = self._require(operation, *contexts)
        self._stack.pop()
        self._indent -= frame.indent
        return frame
