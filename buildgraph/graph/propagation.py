"""Guarded default propagation for subproject configuration.

Defaults are expressed as an ordered table of :class:`PropagationRule`
entries instead of scattered conditionals. A rule applies only when its
predicate holds and the targeted field is still unset, so a module's own
explicit value always wins and an earlier rule's default is never
overwritten by a later rule in the same pass.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional, Sequence

from buildgraph.graph.models import NodeField, NodeRole, ProjectNode

if TYPE_CHECKING:
    from buildgraph.config.schema import DefaultsConfig

logger = logging.getLogger("buildgraph.graph.propagation")

NodePredicate = Callable[[ProjectNode], bool]


@dataclass(frozen=True)
class PropagationRule:
    """A guarded default value for one node field.

    Attributes:
        name: Human readable rule name, used in logs.
        predicate: Decides whether the rule applies to a node.
        field: Field the default is written to.
        default: Value written when the field is unset.
    """

    name: str
    predicate: NodePredicate
    field: NodeField
    default: Any

    def applies_to(self, node: ProjectNode) -> bool:
        return self.predicate(node) and node.is_unset(self.field)


def is_library(node: ProjectNode) -> bool:
    return node.role is NodeRole.LIBRARY


def is_subproject(node: ProjectNode) -> bool:
    return node.role is not NodeRole.ROOT


def library_in_group(group: str) -> NodePredicate:
    """Predicate matching library nodes owned by exactly ``group``."""

    def predicate(node: ProjectNode) -> bool:
        return node.role is NodeRole.LIBRARY and node.group == group

    return predicate


def _with_field(node: ProjectNode, node_field: NodeField, value: Any) -> ProjectNode:
    if node_field is NodeField.COMPILE_SDK:
        return dataclasses.replace(
            node, sdk_bounds=dataclasses.replace(node.sdk_bounds, compile=value)
        )
    if node_field is NodeField.MIN_SDK:
        return dataclasses.replace(
            node, sdk_bounds=dataclasses.replace(node.sdk_bounds, min=value)
        )
    if node_field is NodeField.TARGET_SDK:
        return dataclasses.replace(
            node, sdk_bounds=dataclasses.replace(node.sdk_bounds, target=value)
        )
    if node_field is NodeField.NAMESPACE:
        return dataclasses.replace(node, namespace=value)
    return dataclasses.replace(node, jvm_target=value)


def propagate(node: ProjectNode, rules: Sequence[PropagationRule]) -> ProjectNode:
    """Apply ``rules`` in order and return the resulting node.

    The input node is left untouched; callers must use the returned node.
    An explicitly configured value is silently kept, never reported as a
    conflict.

    Args:
        node: Node as declared by its module.
        rules: Ordered rule table.

    Returns:
        The node after propagation.
    """
    current = node
    for rule in rules:
        if not rule.applies_to(current):
            continue
        current = _with_field(current, rule.field, rule.default)
        logger.debug(
            "%s: %s=%r (rule %s)", current.path, rule.field.value, rule.default, rule.name
        )
    return current


# ---------------------------------------------------------------------------
# Rule factories
# ---------------------------------------------------------------------------


def sdk_bounds_rules(
    compile_sdk: Optional[int], min_sdk: Optional[int], target_sdk: Optional[int]
) -> List[PropagationRule]:
    """Library SDK level defaults; a None default produces no rule."""
    rules = []
    for node_field, value in (
        (NodeField.COMPILE_SDK, compile_sdk),
        (NodeField.MIN_SDK, min_sdk),
        (NodeField.TARGET_SDK, target_sdk),
    ):
        if value is not None:
            rules.append(
                PropagationRule(
                    name=f"library-{node_field.value}",
                    predicate=is_library,
                    field=node_field,
                    default=value,
                )
            )
    return rules


def group_namespace_rules(namespace_by_group: Mapping[str, str]) -> List[PropagationRule]:
    """Namespace defaults for libraries owned by a recognised group.

    Libraries whose group has no entry keep an unset namespace; the module
    author has to declare one.
    """
    return [
        PropagationRule(
            name=f"group-namespace:{group}",
            predicate=library_in_group(group),
            field=NodeField.NAMESPACE,
            default=namespace,
        )
        for group, namespace in namespace_by_group.items()
    ]


def jvm_target_rule(jvm_target: Optional[str]) -> List[PropagationRule]:
    """JVM bytecode target shared by all subprojects."""
    if not jvm_target:
        return []
    return [
        PropagationRule(
            name="subproject-jvm-target",
            predicate=is_subproject,
            field=NodeField.JVM_TARGET,
            default=jvm_target,
        )
    ]


def default_rules(defaults: "DefaultsConfig") -> List[PropagationRule]:
    """Build the standard rule table from graph-wide defaults."""
    return [
        *sdk_bounds_rules(defaults.compile_sdk, defaults.min_sdk, defaults.target_sdk),
        *group_namespace_rules(defaults.namespace_by_group),
        *jvm_target_rule(defaults.jvm_target),
    ]
