"""Backtracking trace generators.

Each generator runs its search once and records a ``choose`` / ``collect`` /
``undo`` step for every transition, so the recorded steps replay the call
tree in pre-order. Children are always visited in input order.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Sequence

from . import constants
from .errors import InvalidInput
from .parsing import parse_numbers
from .recorder import TraceRecorder
from .run_types import DEFAULT_LIMITS, GenerationLimits
from .trace_types import BacktrackStep, StepKind, Trace
from .tree_types import ROOT_NODE, CallTree, NodeStatus, TreeNode

logger = logging.getLogger(__name__)

_STICKY_STATUSES = (NodeStatus.RESULT, NodeStatus.PRUNED)


def node_id_for(path: Sequence[int | str]) -> str:
    """Tree node ids are derived from the choice path, unique within a tree."""
    if not path:
        return constants.ROOT_NODE_ID
    return "-".join([constants.NODE_ID_PREFIX] + [str(v) for v in path])


def _format_path(path: Sequence[int | str]) -> str:
    if path and all(isinstance(v, str) for v in path):
        return f'"{"".join(path)}"'
    return "[" + ", ".join(str(v) for v in path) + "]"


class BacktrackingGenerator(ABC):
    """Base class holding the explicit path / node stack of one search."""

    problem: str = ""

    def __init__(self, limits: GenerationLimits = DEFAULT_LIMITS):
        self._limits = limits
        self._reset()

    def _reset(self) -> None:
        self._recorder: TraceRecorder[BacktrackStep] = TraceRecorder(
            self.problem, BacktrackStep, self._limits
        )
        self._path: list[int | str] = []
        self._stack: list[str] = [constants.ROOT_NODE_ID]
        self._nodes: list[TreeNode] = [ROOT_NODE]
        self._marks: dict[str, NodeStatus] = {}

    def generate(self, values: Any, *args: Any) -> Trace[BacktrackStep]:
        """Validate *values*, run the search and return the recorded trace."""
        params = self.validate(values, *args)
        self._reset()
        self._search(params)
        return self._recorder.finish(tree=CallTree(nodes=tuple(self._nodes)))

    @abstractmethod
    def validate(self, values: Any, *args: Any) -> Any:
        """Return normalised parameters or raise InvalidInput."""
        ...

    @abstractmethod
    def _search(self, params: Any) -> None: ...

    # ── path / tree bookkeeping ──────────────────────────────────

    @property
    def _focus(self) -> str:
        return self._stack[-1]

    def _push(self, value: int | str) -> str:
        parent = self._focus
        self._path.append(value)
        node_id = node_id_for(self._path)
        self._nodes.append(
            TreeNode(
                node_id=node_id,
                parent_id=parent,
                label=str(value),
                path=tuple(self._path),
                depth=len(self._path),
            )
        )
        self._stack.append(node_id)
        return node_id

    def _pop(self) -> int | str:
        node_id = self._stack.pop()
        if self._marks.get(node_id) not in _STICKY_STATUSES:
            self._marks[node_id] = NodeStatus.BACKTRACKED
        return self._path.pop()

    def _statuses(self, kind: StepKind) -> tuple[tuple[str, NodeStatus], ...]:
        statuses = dict(self._marks)
        for node_id in self._stack[:-1]:
            if statuses.get(node_id) not in _STICKY_STATUSES:
                statuses[node_id] = NodeStatus.VISITED
        if kind == StepKind.COLLECT:
            statuses[self._focus] = NodeStatus.RESULT
        elif kind == StepKind.PRUNE:
            statuses[self._focus] = NodeStatus.PRUNED
        else:
            statuses[self._focus] = NodeStatus.ACTIVE
        # Discovery order keeps the snapshot deterministic
        return tuple(
            (node.node_id, statuses[node.node_id])
            for node in self._nodes
            if node.node_id in statuses
        )

    # ── step emission ────────────────────────────────────────────

    def _emit(self, kind: StepKind, description: str, **counters: int) -> None:
        self._recorder.record(
            kind,
            description,
            path=tuple(self._path),
            focus_node_id=self._focus,
            node_statuses=self._statuses(kind),
            counters=tuple(sorted(counters.items())),
        )

    def _collect(self, result: Any, description: str, **counters: int) -> None:
        self._recorder.collect(result)
        self._marks[self._focus] = NodeStatus.RESULT
        self._emit(StepKind.COLLECT, description, **counters)

    def _prune(self, description: str, **counters: int) -> None:
        self._marks[self._focus] = NodeStatus.PRUNED
        self._emit(StepKind.PRUNE, description, **counters)


def _distinct_numbers(values: Any, limit: int, what: str) -> list[int]:
    numbers = parse_numbers(values)
    if not numbers:
        raise InvalidInput(f"{what} needs at least one number")
    if len(set(numbers)) != len(numbers):
        raise InvalidInput(f"{what} requires distinct numbers, got {numbers}")
    if len(numbers) > limit:
        raise InvalidInput(f"{what} supports at most {limit} numbers, got {len(numbers)}")
    return numbers


class SubsetsGenerator(BacktrackingGenerator):
    """Every node of the search tree is a subset, collected on entry."""

    problem = constants.PROBLEM_SUBSETS

    def validate(self, values: Any, *args: Any) -> list[int]:
        return _distinct_numbers(values, self._limits.max_subset_elements, "Subsets")

    def _search(self, nums: list[int]) -> None:
        self._backtrack(nums, 0)

    def _backtrack(self, nums: list[int], start: int) -> None:
        self._collect(
            tuple(self._path),
            f"Collect subset {_format_path(self._path)}",
            start_index=start,
        )
        for i in range(start, len(nums)):
            self._push(nums[i])
            self._emit(StepKind.CHOOSE, f"Choose {nums[i]}", start_index=i + 1)
            self._backtrack(nums, i + 1)
            self._pop()
            self._emit(StepKind.UNDO, f"Undo: remove {nums[i]}", start_index=i + 1)


class PermutationsGenerator(BacktrackingGenerator):
    problem = constants.PROBLEM_PERMUTATIONS

    def validate(self, values: Any, *args: Any) -> list[int]:
        return _distinct_numbers(
            values, self._limits.max_permutation_elements, "Permutations"
        )

    def _search(self, nums: list[int]) -> None:
        self._emit(StepKind.START, "Start backtracking", depth=0)
        self._backtrack(nums, [False] * len(nums))

    def _backtrack(self, nums: list[int], used: list[bool]) -> None:
        if len(self._path) == len(nums):
            self._collect(
                tuple(self._path),
                f"Found permutation {_format_path(self._path)}",
                depth=len(self._path),
            )
            return
        for i, value in enumerate(nums):
            if used[i]:
                continue
            used[i] = True
            self._push(value)
            self._emit(StepKind.CHOOSE, f"Choose {value}", depth=len(self._path))
            self._backtrack(nums, used)
            self._pop()
            used[i] = False
            self._emit(StepKind.UNDO, f"Undo: release {value}", depth=len(self._path))


class ParenthesesGenerator(BacktrackingGenerator):
    """Balanced sequences of n pairs; '(' is always tried before ')'."""

    problem = constants.PROBLEM_PARENTHESES

    def validate(self, values: Any, *args: Any) -> int:
        if isinstance(values, str):
            try:
                values = int(values.strip())
            except ValueError:
                raise InvalidInput(f"n must be an integer, got {values!r}") from None
        if isinstance(values, bool) or not isinstance(values, int):
            raise InvalidInput(f"n must be an integer, got {values!r}")
        if values < 1:
            raise InvalidInput(f"n must be >= 1, got {values}")
        if values > self._limits.max_parentheses_pairs:
            raise InvalidInput(
                f"n must be <= {self._limits.max_parentheses_pairs}, got {values}"
            )
        return values

    def _search(self, n: int) -> None:
        self._emit(StepKind.START, "Start search", left=0, right=0, n=n)
        self._backtrack(n, 0, 0)

    def _backtrack(self, n: int, left: int, right: int) -> None:
        if len(self._path) == 2 * n:
            sequence = "".join(str(c) for c in self._path)
            self._collect(
                sequence, f'Found valid sequence "{sequence}"', left=left, right=right, n=n
            )
            return
        if left < n:
            self._branch("(", n, left + 1, right, f"Add '(': left={left + 1} <= {n}")
        if right < left:
            self._branch(")", n, left, right + 1, f"Add ')': right={right + 1} <= left={left}")

    def _branch(self, char: str, n: int, left: int, right: int, description: str) -> None:
        self._push(char)
        self._emit(StepKind.CHOOSE, description, left=left, right=right, n=n)
        self._backtrack(n, left, right)
        self._pop()
        if char == "(":
            left -= 1
        else:
            right -= 1
        self._emit(StepKind.UNDO, f"Undo '{char}'", left=left, right=right, n=n)


class LetterCombinationsGenerator(BacktrackingGenerator):
    problem = constants.PROBLEM_LETTER_COMBINATIONS

    def validate(self, values: Any, *args: Any) -> str:
        if isinstance(values, int) and not isinstance(values, bool):
            values = str(values)
        elif not isinstance(values, str):
            values = "".join(str(v) for v in values)
        digits = "".join(values.split())
        if not digits:
            raise InvalidInput("Enter at least one digit between 2 and 9")
        for i, d in enumerate(digits):
            if d not in constants.PHONE_MAP:
                raise InvalidInput(
                    f"Invalid digit at position {i + 1}: {d!r} (allowed: 2-9)",
                    column=i + 1,
                )
        if len(digits) > self._limits.max_phone_digits:
            raise InvalidInput(
                f"At most {self._limits.max_phone_digits} digits are supported, "
                f"got {len(digits)}"
            )
        return digits

    def _search(self, digits: str) -> None:
        self._emit(StepKind.START, "Start search", digit_index=0)
        self._backtrack(digits, 0)

    def _backtrack(self, digits: str, index: int) -> None:
        if index == len(digits):
            combo = "".join(str(c) for c in self._path)
            self._collect(combo, f'Found combination "{combo}"', digit_index=index)
            return
        digit = digits[index]
        for char in constants.PHONE_MAP[digit]:
            self._push(char)
            self._emit(
                StepKind.CHOOSE, f"Digit {digit} picks '{char}'", digit_index=index
            )
            self._backtrack(digits, index + 1)
            self._pop()
            self._emit(StepKind.UNDO, f"Undo '{char}'", digit_index=index)


def count_combination_nodes(candidates: Sequence[int], target: int) -> int:
    """Size of the combination-sum search tree, root included."""
    cands = tuple(candidates)

    @lru_cache(maxsize=None)
    def subtree(start: int, remaining: int) -> int:
        total = 1
        for i in range(start, len(cands)):
            if cands[i] >= remaining:
                total += 1
            else:
                total += subtree(i, remaining - cands[i])
        return total

    return subtree(0, target)


class CombinationSumGenerator(BacktrackingGenerator):
    """Candidates may be reused; a branch whose sum overshoots is pruned."""

    problem = constants.PROBLEM_COMBINATION_SUM

    def validate(self, values: Any, *args: Any) -> tuple[list[int], int]:
        if not args:
            raise InvalidInput("Combination sum needs a target")
        target = args[0]
        if isinstance(target, str):
            try:
                target = int(target.strip())
            except ValueError:
                raise InvalidInput(f"Target must be an integer, got {target!r}") from None
        if isinstance(target, bool) or not isinstance(target, int):
            raise InvalidInput(f"Target must be an integer, got {target!r}")
        if target < 1 or target > self._limits.max_combination_target:
            raise InvalidInput(
                f"Target must be between 1 and {self._limits.max_combination_target}, "
                f"got {target}"
            )
        candidates = sorted(
            _distinct_numbers(
                values, self._limits.max_combination_candidates, "Combination sum"
            )
        )
        if candidates[0] < 1:
            raise InvalidInput(f"Candidates must be positive, got {candidates}")
        nodes = count_combination_nodes(candidates, target)
        if nodes > self._limits.max_combination_tree_nodes:
            raise InvalidInput(
                f"Search tree would have {nodes} nodes; "
                f"at most {self._limits.max_combination_tree_nodes} are supported"
            )
        return candidates, target

    def _search(self, params: tuple[list[int], int]) -> None:
        candidates, target = params
        self._emit(StepKind.START, "Start search", sum=0, target=target)
        self._backtrack(candidates, target, 0, 0)

    def _backtrack(self, candidates: list[int], target: int, start: int, total: int) -> None:
        if total == target:
            self._collect(
                tuple(self._path),
                f"Found combination {_format_path(self._path)} summing to {target}",
                sum=total,
                target=target,
            )
            return
        if total > target:
            self._prune(f"Sum {total} > {target}, prune", sum=total, target=target)
            return
        for i in range(start, len(candidates)):
            value = candidates[i]
            self._push(value)
            self._emit(
                StepKind.CHOOSE,
                f"Choose {value}, running sum {total + value}",
                sum=total + value,
                target=target,
            )
            self._backtrack(candidates, target, i, total + value)
            self._pop()
            self._emit(
                StepKind.UNDO,
                f"Undo: remove {value}, back to sum {total}",
                sum=total,
                target=target,
            )


_GENERATORS: dict[str, type[BacktrackingGenerator]] = {
    cls.problem: cls
    for cls in (
        SubsetsGenerator,
        PermutationsGenerator,
        ParenthesesGenerator,
        LetterCombinationsGenerator,
        CombinationSumGenerator,
    )
}


def get_backtracking_generator(
    problem: str, limits: GenerationLimits = DEFAULT_LIMITS
) -> BacktrackingGenerator:
    """Factory for backtracking generators by problem name."""
    cls = _GENERATORS.get(problem)
    if cls is None:
        raise InvalidInput(
            f"Unknown backtracking problem: {problem!r}. "
            f"Available: {sorted(_GENERATORS)}"
        )
    return cls(limits)
