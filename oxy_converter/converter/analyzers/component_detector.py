"""
Component Detector - Spot repeated structures worth extracting as components.

The signature of a container-like element is its tag plus the ordered tags
of its direct element children, e.g. ``div[img,h3,p]``. A signature seen
three or more times produces one info suggestion. The tree is not changed.
"""

from typing import Dict, List, Optional

from bs4 import Tag

from ..contracts.report import ConversionReport


class ComponentDetector:
    """Counts element signatures across a document."""

    CANDIDATE_TAGS = frozenset({"div", "section", "article", "li", "a"})
    MIN_OCCURRENCES = 3

    def signature(self, node: Tag) -> Optional[str]:
        """Structure signature of a node, None for non-candidates."""
        tag = node.name.lower()
        if tag not in self.CANDIDATE_TAGS:
            return None

        child_tags = [child.name.lower() for child in node.children if isinstance(child, Tag)]
        if not child_tags:
            return None

        return f"{tag}[{','.join(child_tags)}]"

    def count_signatures(self, nodes: List) -> Dict[str, int]:
        """Count signatures over the given nodes and all their descendants."""
        counts: Dict[str, int] = {}
        for node in nodes:
            if not isinstance(node, Tag):
                continue
            for element in [node] + node.find_all(True):
                signature = self.signature(element)
                if signature:
                    counts[signature] = counts.get(signature, 0) + 1
        return counts

    def analyze(self, nodes: List, report: ConversionReport) -> List[str]:
        """
        Report repeated structures.

        Args:
            nodes: Top-level content nodes
            report: Report of the running conversion

        Returns:
            Signatures that met the repetition threshold
        """
        repeated = []
        for signature, count in self.count_signatures(nodes).items():
            if count < self.MIN_OCCURRENCES:
                continue
            repeated.append(signature)
            tag = signature.split("[", 1)[0]
            report.add_info(
                f"Detected {count} repeated <{tag}> structures. "
                f"Consider creating a reusable Oxygen component or partial for these."
            )
        return repeated
