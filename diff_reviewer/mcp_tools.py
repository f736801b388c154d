"""MCP tool definitions for the diff reviewer."""

from __future__ import annotations

import asyncio
import json
import logging
import traceback
from typing import Optional

from fastmcp import FastMCP

from diff_reviewer.analyzer import (
    review_branches as _review_branches,
    review_commits as _review_commits,
    review_diff as _review_diff,
)
from diff_reviewer.config import DEFAULT_TO_REF
from diff_reviewer.models import FilterOptions, ReviewResult
from diff_reviewer.prompts import TemplateStore
from diff_reviewer.report import format_review_result

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("markdown", "json")


def _error_response(tool_name: str, error: Exception) -> str:
    """Log a tool failure and turn it into the text payload sent to the client."""
    logger.error("Tool %s failed: %s\n%s", tool_name, error, traceback.format_exc())
    return f"Error: {error}"


def _check_output_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unknown output_format '{output_format}' "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )


def _render(result: ReviewResult, output_format: str) -> str:
    if output_format == "json":
        return result.to_json()
    return format_review_result(result)


def _resolve_prompt(templates: TemplateStore, review_prompt: Optional[str]) -> Optional[str]:
    """A template name selects that template; any other text is a custom prompt."""
    if review_prompt and templates.has_template(review_prompt):
        return templates.get_template(review_prompt)
    return review_prompt


def register_tools(mcp: FastMCP, templates: Optional[TemplateStore] = None) -> None:
    """Register all review tools on the given FastMCP server instance."""
    templates = templates or TemplateStore()

    @mcp.tool()
    async def review_commits(
        from_commit: str,
        to_commit: str = DEFAULT_TO_REF,
        repository_path: str = ".",
        review_prompt: Optional[str] = None,
        file_extensions: Optional[list[str]] = None,
        exclude_patterns: Optional[list[str]] = None,
        output_format: str = "markdown",
    ) -> str:
        """Review code changes between two commits.

        Args:
            from_commit: Source commit hash or branch name
            to_commit: Target commit hash or branch name (default: HEAD)
            repository_path: Path to the git repository (default: current directory)
            review_prompt: Custom review prompt or the name of a predefined template
            file_extensions: File extensions to review (e.g., [".ts", ".js", ".py"])
            exclude_patterns: Patterns to exclude from review (e.g., ["test", "mock"])
            output_format: "markdown" (default) or "json"
        """
        try:
            _check_output_format(output_format)
            result = await asyncio.to_thread(
                _review_commits,
                from_commit=from_commit,
                to_commit=to_commit,
                repository_path=repository_path,
                options=FilterOptions(file_extensions, exclude_patterns),
                review_prompt=_resolve_prompt(templates, review_prompt),
                templates=templates,
            )
            return _render(result, output_format)
        except Exception as e:
            return _error_response("review_commits", e)

    @mcp.tool()
    async def review_branches(
        source_branch: str,
        target_branch: Optional[str] = None,
        repository_path: str = ".",
        review_prompt: Optional[str] = None,
        file_extensions: Optional[list[str]] = None,
        exclude_patterns: Optional[list[str]] = None,
        output_format: str = "markdown",
    ) -> str:
        """Review code changes between two branches.

        Args:
            source_branch: Source branch name
            target_branch: Target branch name (default: main/master)
            repository_path: Path to the git repository (default: current directory)
            review_prompt: Custom review prompt or the name of a predefined template
            file_extensions: File extensions to review (e.g., [".ts", ".js", ".py"])
            exclude_patterns: Patterns to exclude from review (e.g., ["test", "mock"])
            output_format: "markdown" (default) or "json"
        """
        try:
            _check_output_format(output_format)
            result = await asyncio.to_thread(
                _review_branches,
                source_branch=source_branch,
                target_branch=target_branch,
                repository_path=repository_path,
                options=FilterOptions(file_extensions, exclude_patterns),
                review_prompt=_resolve_prompt(templates, review_prompt),
                templates=templates,
            )
            return _render(result, output_format)
        except Exception as e:
            return _error_response("review_branches", e)

    @mcp.tool()
    def review_diff(
        diff: str,
        review_prompt: Optional[str] = None,
        file_extensions: Optional[list[str]] = None,
        exclude_patterns: Optional[list[str]] = None,
        output_format: str = "markdown",
    ) -> str:
        """Review a unified diff the caller already has (e.g., from `git diff`).

        Args:
            diff: The unified diff text
            review_prompt: Custom review prompt or the name of a predefined template
            file_extensions: File extensions to review (e.g., [".ts", ".js", ".py"])
            exclude_patterns: Patterns to exclude from review (e.g., ["test", "mock"])
            output_format: "markdown" (default) or "json"
        """
        try:
            _check_output_format(output_format)
            result = _review_diff(
                diff,
                options=FilterOptions(file_extensions, exclude_patterns),
                review_prompt=_resolve_prompt(templates, review_prompt),
                templates=templates,
            )
            return _render(result, output_format)
        except Exception as e:
            return _error_response("review_diff", e)

    @mcp.tool()
    def list_review_templates() -> str:
        """List available review prompt templates."""
        return json.dumps(templates.list_templates(), indent=2)

    @mcp.tool()
    def get_review_template(template_name: str) -> str:
        """Get a specific review prompt template.

        Unknown names return the default (comprehensive) template.

        Args:
            template_name: Name of the review template
        """
        if not templates.has_template(template_name):
            logger.info(
                "Template %r not found, using %r", template_name, templates.default
            )
        return templates.get_template(template_name)
