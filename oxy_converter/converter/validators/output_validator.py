"""
Output Validator - Structural check of converted element trees.

Errors mark output the page builder cannot load (missing or mistyped
required fields). Warnings mark output it can load but may render
incompletely (unknown element types, missing contract paths, incomplete
stats). The validator never mutates its input.

Usage:
    from oxy_converter.converter.validators import OutputValidator

    report = OutputValidator.validate(result.element.to_dict())
    report["valid"], report["errors"], report["warnings"]
"""

from typing import Any, Dict, List, Union

from ..contracts.element_types import ElementType, get_required_property_paths
from ..contracts.result import ConversionResult


STATS_FIELDS = ("elements", "tailwindClasses", "customClasses", "warnings", "info")


def _type_name(value: Any) -> str:
    return type(value).__name__


def has_path(properties: Dict[str, Any], path: str) -> bool:
    """Check if a dotted path exists in a nested mapping."""
    current: Any = properties
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            return False
        current = current[segment]
    return True


class OutputValidator:
    """Collects errors and warnings for serialized element trees."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @classmethod
    def validate(cls, element: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate one serialized element tree.

        Returns:
            {"valid": bool, "errors": [...], "warnings": [...]}
        """
        validator = cls()
        validator.validate_element(element)
        return {"valid": validator.is_valid, "errors": validator.errors, "warnings": validator.warnings}

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def reset(self) -> None:
        self.errors = []
        self.warnings = []

    # =========================================================================
    # RESULTS
    # =========================================================================

    def validate_conversion_result(
        self,
        result: Union[ConversionResult, Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Validate every element of a conversion result and its stats block.

        Args:
            result: ConversionResult or its to_dict() payload

        Returns:
            {"valid": bool, "errors": [...], "warnings": [...]}
        """
        self.reset()
        if isinstance(result, ConversionResult):
            result = result.to_dict()

        if "success" not in result:
            self.errors.append("Missing 'success' field in conversion result")
        elif result["success"]:
            self._validate_success(result)

        return {"valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}

    def _validate_success(self, result: Dict[str, Any]) -> None:
        if result.get("element") is None:
            self.errors.append("Missing 'element' field in successful conversion result")
            return

        self.validate_element(result["element"], "root")

        if result.get("cssElement") is not None:
            self.validate_element(result["cssElement"], "cssElement")

        for key in ("iconScriptElements", "headLinkElements"):
            elements = result.get(key)
            if isinstance(elements, list):
                for index, element in enumerate(elements):
                    self.validate_element(element, f"{key}[{index}]")

        if isinstance(result.get("stats"), dict):
            self.validate_stats(result["stats"])

    # =========================================================================
    # ELEMENTS
    # =========================================================================

    def validate_element(self, element: Any, path: str = "element") -> bool:
        """
        Validate one element and its subtree.

        Returns:
            False when this node itself has errors (children report their own)
        """
        if not isinstance(element, dict):
            self.errors.append(f"[{path}] Element must be an object, got {_type_name(element)}")
            return False

        valid = True

        if "id" not in element or element["id"] is None:
            self.errors.append(f"[{path}] Missing required 'id' field")
            valid = False
        elif not isinstance(element["id"], int) or isinstance(element["id"], bool):
            self.errors.append(f"[{path}] Field 'id' must be an integer, got {_type_name(element['id'])}")
            valid = False

        data = element.get("data")
        if data is None:
            self.errors.append(f"[{path}] Missing required 'data' field")
            valid = False
        elif not isinstance(data, dict):
            self.errors.append(f"[{path}] Field 'data' must be an object")
            valid = False
        else:
            valid = self._validate_data(data, path) and valid

        children = element.get("children")
        if children is None:
            self.errors.append(f"[{path}] Missing required 'children' field")
            valid = False
        elif not isinstance(children, list):
            self.errors.append(f"[{path}] Field 'children' must be an array")
            valid = False
        else:
            for index, child in enumerate(children):
                self.validate_element(child, f"{path}.children[{index}]")

        return valid

    def _validate_data(self, data: Dict[str, Any], path: str) -> bool:
        valid = True
        element_type = data.get("type")

        if element_type is None:
            self.errors.append(f"[{path}] Missing required 'data.type' field")
            valid = False
        elif not isinstance(element_type, str):
            self.errors.append(f"[{path}] Field 'data.type' must be a string")
            valid = False
        elif not ElementType.is_valid(element_type):
            self.warnings.append(f"[{path}] Unknown element type: {element_type}")

        properties = data.get("properties")
        if properties is None:
            self.errors.append(f"[{path}] Missing required 'data.properties' field")
            valid = False
        elif not isinstance(properties, dict):
            self.errors.append(f"[{path}] Field 'data.properties' must be an object")
            valid = False
        else:
            self._validate_properties(properties, f"{path}.data.properties")
            if isinstance(element_type, str):
                self._validate_contract(element_type, properties, path)

        return valid

    def _validate_properties(self, properties: Dict[str, Any], path: str) -> None:
        settings = properties.get("settings")
        if not isinstance(settings, dict):
            return

        advanced = settings.get("advanced")
        if isinstance(advanced, dict):
            self._validate_advanced(advanced, path)

        interactions = settings.get("interactions")
        if isinstance(interactions, dict) and "interactions" in interactions:
            items = interactions["interactions"]
            if not isinstance(items, list):
                self.errors.append(f"[{path}] Field 'settings.interactions.interactions' must be an array")
                return
            for index, interaction in enumerate(items):
                self._validate_interaction(interaction, f"{path}.settings.interactions.interactions[{index}]")

    def _validate_advanced(self, advanced: Dict[str, Any], path: str) -> None:
        if "classes" in advanced:
            classes = advanced["classes"]
            if not isinstance(classes, list):
                self.errors.append(
                    f"[{path}] Field 'settings.advanced.classes' must be an array, got {_type_name(classes)}"
                )
            else:
                for index, name in enumerate(classes):
                    if not isinstance(name, str):
                        self.errors.append(
                            f"[{path}] Each class in 'settings.advanced.classes' must be a string, "
                            f"got {_type_name(name)} at index {index}"
                        )

        if "id" in advanced and not isinstance(advanced["id"], str):
            self.errors.append(f"[{path}] Field 'settings.advanced.id' must be a string")

        if "attributes" in advanced:
            attributes = advanced["attributes"]
            if not isinstance(attributes, list):
                self.errors.append(f"[{path}] Field 'settings.advanced.attributes' must be an array")
                return
            for index, attribute in enumerate(attributes):
                if not isinstance(attribute, dict):
                    self.errors.append(f"[{path}] Each attribute must be an object with 'name' and 'value' keys")
                elif "name" not in attribute or "value" not in attribute:
                    self.errors.append(f"[{path}] Attribute at index {index} missing 'name' or 'value'")

    def _validate_interaction(self, interaction: Any, path: str) -> None:
        if not isinstance(interaction, dict):
            self.errors.append(f"[{path}] Interaction must be an object")
            return

        if "trigger" not in interaction:
            self.errors.append(f"[{path}] Interaction missing required 'trigger' field")
        elif not isinstance(interaction["trigger"], str):
            self.errors.append(f"[{path}] Interaction 'trigger' must be a string")

        if "actions" not in interaction:
            self.errors.append(f"[{path}] Interaction missing required 'actions' field")
        elif not isinstance(interaction["actions"], list):
            self.errors.append(f"[{path}] Interaction 'actions' must be an array")

    def _validate_contract(self, element_type: str, properties: Dict[str, Any], path: str) -> None:
        for required in get_required_property_paths(element_type):
            if not has_path(properties, required):
                self.warnings.append(f"[{path}] Missing contract path for {element_type}: {required}")

    # =========================================================================
    # STATS
    # =========================================================================

    def validate_stats(self, stats: Dict[str, Any]) -> None:
        for name in STATS_FIELDS:
            if name not in stats:
                self.warnings.append(f"Stats missing expected field: {name}")

        if "elements" in stats and not isinstance(stats["elements"], int):
            self.errors.append("Stats 'elements' must be an integer")
        if "warnings" in stats and not isinstance(stats["warnings"], list):
            self.errors.append("Stats 'warnings' must be an array")
