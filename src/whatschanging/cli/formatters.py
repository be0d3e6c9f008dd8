"""Result formatters for CLI output.

Provides formatting for comparison results in multiple formats:
- text: One line per compared pair
- JSON: Machine-readable format
- JUnit XML: CI/CD integration format
- TAP: Test Anything Protocol format
"""

import json
import time
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any

FORMATS = ("text", "json", "junit", "tap")


def summarize(results: list[dict[str, Any]], duration: float = 0.0) -> dict[str, Any]:
    """Build summary statistics for a list of comparison results.

    Args:
        results: Result dictionaries, as produced by ``ComparisonResult.to_dict``
        duration: Total time spent, in seconds

    Returns:
        Summary dictionary
    """
    return {
        "total": len(results),
        "same": sum(1 for r in results if r.get("compared") and r.get("same")),
        "different": sum(1 for r in results if r.get("compared") and not r.get("same")),
        "errors": sum(1 for r in results if r.get("error")),
        "duration": duration,
        "timestamp": time.time(),
    }


def format_results(
    results: list[dict[str, Any]],
    summary: dict[str, Any],
    format_type: str,
) -> str:
    """Format comparison results in the specified format.

    Args:
        results: List of comparison result dictionaries
        summary: Summary statistics dictionary
        format_type: Output format ("text", "json", "junit", or "tap")

    Returns:
        Formatted string output

    Raises:
        ValueError: If format_type is not recognized
    """
    if format_type == "text":
        return _format_text(results, summary)
    elif format_type == "json":
        return _format_json(results, summary)
    elif format_type == "junit":
        return _format_junit(results, summary)
    elif format_type == "tap":
        return _format_tap(results, summary)
    else:
        raise ValueError(f"Unknown format type: {format_type}")


def _pair_name(result: dict[str, Any]) -> str:
    if result.get("pair"):
        return str(result["pair"])
    names = [(side or {}).get("name") or "?" for side in (result.get("first"), result.get("second"))]
    return " vs ".join(names)


def _describe(result: dict[str, Any]) -> str:
    if result.get("error"):
        return f"error: {result['error']}"
    if not result.get("compared"):
        return "not compared"
    if result.get("same"):
        return "identical"
    return f"{result['different_pixels']} of {result['total_pixels']} pixels differ"


def _format_text(results: list[dict[str, Any]], summary: dict[str, Any]) -> str:
    lines = [f"{_pair_name(result)}: {_describe(result)}" for result in results]
    if len(results) > 1:
        lines.append(
            f"{summary['total']} compared, {summary['same']} identical, "
            f"{summary['different']} different, {summary['errors']} errors"
        )
    return "\n".join(lines)


def _format_json(results: list[dict[str, Any]], summary: dict[str, Any]) -> str:
    """Format results as JSON.

    Args:
        results: List of comparison result dictionaries
        summary: Summary statistics dictionary

    Returns:
        JSON formatted string
    """
    timestamp = summary.get("timestamp", time.time())
    timestamp_iso = datetime.fromtimestamp(timestamp).isoformat()

    output = {
        "summary": summary,
        "comparisons": results,
        "timestamp_iso": timestamp_iso,
    }

    return json.dumps(output, indent=2)


def _format_junit(results: list[dict[str, Any]], summary: dict[str, Any]) -> str:
    """Format results as JUnit XML.

    Args:
        results: List of comparison result dictionaries
        summary: Summary statistics dictionary

    Returns:
        JUnit XML formatted string
    """
    testsuites = ET.Element("testsuites")
    testsuites.set("tests", str(summary.get("total", 0)))
    testsuites.set("failures", str(summary.get("different", 0)))
    testsuites.set("errors", str(summary.get("errors", 0)))
    testsuites.set("time", f"{summary.get('duration', 0):.3f}")

    testsuite = ET.SubElement(testsuites, "testsuite")
    testsuite.set("name", "whatschanging")
    testsuite.set("tests", str(summary.get("total", 0)))
    testsuite.set("failures", str(summary.get("different", 0)))
    testsuite.set("errors", str(summary.get("errors", 0)))

    for result in results:
        testcase = ET.SubElement(testsuite, "testcase")
        testcase.set("name", _pair_name(result))
        testcase.set("classname", "whatschanging.comparisons")

        if result.get("error"):
            error = ET.SubElement(testcase, "error")
            error.set("message", result["error"])
            error.set("type", result.get("error_code") or "ERROR")
        elif result.get("compared") and not result.get("same"):
            failure = ET.SubElement(testcase, "failure")
            failure.set("message", _describe(result))
            failure.set("type", "PixelDifference")

    xml_string = ET.tostring(testsuites, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{xml_string}'


def _format_tap(results: list[dict[str, Any]], summary: dict[str, Any]) -> str:
    """Format results as TAP (Test Anything Protocol).

    Args:
        results: List of comparison result dictionaries
        summary: Summary statistics dictionary

    Returns:
        TAP formatted string
    """
    lines = ["TAP version 13", f"1..{summary.get('total', len(results))}"]

    for i, result in enumerate(results, 1):
        passed = bool(result.get("compared") and result.get("same"))
        status = "ok" if passed else "not ok"
        lines.append(f"{status} {i} - {_pair_name(result)}")

        lines.append("  ---")
        lines.append(f"  outcome: {_describe(result)}")
        if result.get("compared"):
            lines.append(f"  size: {result['width']}x{result['height']}")
        lines.append("  ...")

    return "\n".join(lines)
