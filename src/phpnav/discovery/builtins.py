"""Types a PHP runtime declares before any project file is loaded.

Stands in for the interpreter's declared-type registry when there is no live
runtime to ask: core classes, interfaces and SPL types that every project can
reference without an autoload rule.
"""

from __future__ import annotations

BUILTIN_TYPES: frozenset[str] = frozenset(
    {
        # Core classes
        "stdClass",
        "Closure",
        "Generator",
        "WeakReference",
        "WeakMap",
        "Fiber",
        "ReflectionClass",
        "ReflectionMethod",
        "ReflectionProperty",
        "ReflectionFunction",
        "ReflectionException",
        "DateTime",
        "DateTimeImmutable",
        "DateTimeZone",
        "DateInterval",
        "DatePeriod",
        # Core interfaces
        "Traversable",
        "Iterator",
        "IteratorAggregate",
        "ArrayAccess",
        "Countable",
        "Serializable",
        "Stringable",
        "Throwable",
        "JsonSerializable",
        "UnitEnum",
        "BackedEnum",
        "DateTimeInterface",
        # Exceptions and errors
        "Exception",
        "ErrorException",
        "Error",
        "TypeError",
        "ValueError",
        "ArithmeticError",
        "DivisionByZeroError",
        "ArgumentCountError",
        "AssertionError",
        "CompileError",
        "ParseError",
        "UnhandledMatchError",
        "LogicException",
        "BadFunctionCallException",
        "BadMethodCallException",
        "DomainException",
        "InvalidArgumentException",
        "LengthException",
        "OutOfRangeException",
        "RuntimeException",
        "OutOfBoundsException",
        "OverflowException",
        "RangeException",
        "UnderflowException",
        "UnexpectedValueException",
        "JsonException",
        # SPL
        "ArrayObject",
        "ArrayIterator",
        "RecursiveArrayIterator",
        "RecursiveIterator",
        "OuterIterator",
        "SeekableIterator",
        "IteratorIterator",
        "RecursiveIteratorIterator",
        "RecursiveDirectoryIterator",
        "DirectoryIterator",
        "FilesystemIterator",
        "GlobIterator",
        "RegexIterator",
        "RecursiveRegexIterator",
        "FilterIterator",
        "CallbackFilterIterator",
        "LimitIterator",
        "CachingIterator",
        "AppendIterator",
        "MultipleIterator",
        "NoRewindIterator",
        "InfiniteIterator",
        "EmptyIterator",
        "SplFileInfo",
        "SplFileObject",
        "SplTempFileObject",
        "SplDoublyLinkedList",
        "SplQueue",
        "SplStack",
        "SplHeap",
        "SplMinHeap",
        "SplMaxHeap",
        "SplPriorityQueue",
        "SplFixedArray",
        "SplObjectStorage",
        "SplObserver",
        "SplSubject",
    }
)


def builtin_type_names() -> frozenset[str]:
    """Snapshot of runtime-declared type names."""
    return BUILTIN_TYPES
