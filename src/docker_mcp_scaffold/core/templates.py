from __future__ import annotations

from typing import Dict, List

from .errors import InvalidServerSpec
from .placeholders import find_placeholders

# Templates are plain text with [TOKEN] placeholders. Tokens that are
# filled with multi-line blocks sit at the end of a line so an empty
# block leaves no blank line behind.

PYTHON_DOCKERFILE = """\
# Use Python slim image
FROM python:3.11-slim

# Set working directory
WORKDIR /app

# Set Python unbuffered mode
ENV PYTHONUNBUFFERED=1

# Copy requirements first for better caching
COPY requirements.txt .

# Install dependencies
RUN pip install --no-cache-dir -r requirements.txt

# Copy the server code
COPY [SOURCE_FILE] .

# Create non-root user
RUN useradd -m -u 1000 mcpuser && \\
    chown -R mcpuser:mcpuser /app

# Switch to non-root user
USER mcpuser

# Run the server
CMD ["python", "[SOURCE_FILE]"]
"""

PYTHON_REQUIREMENTS = """\
mcp[cli]>=1.2.0
httpx[EXTRA_REQUIREMENTS]
"""

PYTHON_SERVER = '''\
#!/usr/bin/env python3
"""
Simple [DOC_TITLE] MCP Server - [DOC_DESCRIPTION]
"""
import os
import sys
import logging
from datetime import datetime, timezone
import httpx
from mcp.server.fastmcp import FastMCP

# Configure logging to stderr
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("[SLUG]-server")

# Initialize MCP server - NO PROMPT PARAMETER!
mcp = FastMCP("[SLUG]")

# Configuration
[SECRET_CONFIG]

# === UTILITY FUNCTIONS ===

def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()

# === MCP TOOLS ===

[TOOL_FUNCTIONS]

# === SERVER STARTUP ===
if __name__ == "__main__":
    logger.info("Starting [TITLE_STR] MCP server...")[SECRET_WARNINGS]
    try:
        mcp.run(transport="stdio")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        sys.exit(1)
'''

PYTHON_TOOL = '''\
@mcp.tool()
async def [TOOL_NAME]([TOOL_SIGNATURE]) -> str:
    """[TOOL_DESCRIPTION]"""
    logger.info("Executing [TOOL_NAME]")[TOOL_CHECKS]
    try:
        # Implement [TOOL_NAME] here and return a formatted result string.
        return f"✅ [TOOL_NAME] completed at {utc_now()}"
    except Exception as e:
        logger.error(f"[TOOL_NAME] failed: {e}")
        return f"❌ Error: {str(e)}"
'''

NODE_DOCKERFILE = """\
# Use Node slim image
FROM node:20-slim

# Set working directory
WORKDIR /app

# Copy the manifest first for better caching
COPY package.json ./

# Install dependencies
RUN npm install --omit=dev

# Copy the server code
COPY [SOURCE_FILE] ./

# Run as the unprivileged node user
RUN chown -R node:node /app
USER node

# Run the server
CMD ["node", "[SOURCE_FILE]"]
"""

NODE_PACKAGE = """\
{
  "name": "[IMAGE]",
  "version": "1.0.0",
  "description": [DESCRIPTION_JSON],
  "type": "module",
  "main": "[SOURCE_FILE]",
  "scripts": {
    "start": "node [SOURCE_FILE]"
  },
  "dependencies": {
[NODE_DEPENDENCIES]
  }
}
"""

NODE_SERVER = """\
#!/usr/bin/env node
// Simple [TITLE] MCP Server - [DESCRIPTION]
import { McpServer } from "@modelcontextprotocol/sdk/server/mcp.js";
import { StdioServerTransport } from "@modelcontextprotocol/sdk/server/stdio.js";
import { z } from "zod";

// Log to stderr only; stdout carries the MCP protocol
const log = (...args) => console.error(new Date().toISOString(), "[SLUG]-server", ...args);
const text = (t) => ({ content: [{ type: "text", text: t }] });

const server = new McpServer({ name: "[SLUG]", version: "1.0.0" });

// Configuration
[SECRET_CONFIG]

// === MCP TOOLS ===

[TOOL_FUNCTIONS]

// === SERVER STARTUP ===
async function main() {
  log("Starting [TITLE_STR] MCP server...");[SECRET_WARNINGS]
  const transport = new StdioServerTransport();
  await server.connect(transport);
}

main().catch((err) => {
  log("Server error:", err);
  process.exit(1);
});
"""

NODE_TOOL = """\
server.tool(
  "[TOOL_NAME]",
  [TOOL_DESCRIPTION_JSON],
  [TOOL_SCHEMA],
  async ([TOOL_ARGS]) => {
    log("Executing [TOOL_NAME]");[TOOL_CHECKS]
    try {
      // Implement [TOOL_NAME] here and return a formatted result string.
      return text(`✅ [TOOL_NAME] completed at ${new Date().toISOString()}`);
    } catch (err) {
      log("[TOOL_NAME] failed:", err);
      return text(`❌ Error: ${err.message}`);
    }
  }
);
"""

README = """\
# [TITLE] MCP Server

A Model Context Protocol (MCP) server for [TITLE].

[DESCRIPTION]

## Purpose

This MCP server provides a secure interface for AI assistants to use [TITLE]
through the Docker MCP Gateway.

## Features

### Current Implementation
[TOOL_LIST]

## Prerequisites

- Docker Desktop with MCP Toolkit enabled
- Docker MCP CLI plugin (`docker mcp` command)
[SECRET_PREREQUISITES]

## Installation

[INSTALL_STEPS]

## Usage Examples

In Claude Desktop, you can ask:
[USAGE_EXAMPLES]

## Architecture

```
Claude Desktop → MCP Gateway → [TITLE] MCP Server → [TITLE]
                      ↓
              Docker Desktop Secrets
```

## Development

### Local Testing

```bash
docker build -t [IMAGE] .
docker run -i --rm [IMAGE]
```

### Adding New Tools

1. Add the tool to `[SOURCE_FILE]` with a single-line description
2. Update the catalog entry with the new tool name
3. Rebuild the Docker image

## Troubleshooting

### Tools Not Appearing
- Verify the Docker image built successfully
- Check the catalog and registry files
- Ensure Claude Desktop config includes the custom catalog
- Restart Claude Desktop

### Authentication Errors
- Verify secrets with `docker mcp secret list`
- Ensure secret names match in code and catalog

## Security Considerations

- All secrets stored in Docker Desktop secrets
- Never hardcode credentials
- Running as non-root user
- Sensitive data never logged

## License

[LICENSE] License
"""

CLAUDE_MD = """\
# [TITLE] MCP Server Implementation Notes

## Overview

`[SOURCE_FILE]` implements the [TITLE] MCP server ([RUNTIME_LABEL]) packaged as
the `[IMAGE]` Docker image and registered in the custom catalog as `[SLUG]`.

## Tools

[TOOL_LIST]

## Rules For Changes

[RULES]

## Environment

[SECRET_LIST]
"""

TEMPLATES: Dict[str, Dict[str, str]] = {
    "python": {
        "Dockerfile": PYTHON_DOCKERFILE,
        "requirements.txt": PYTHON_REQUIREMENTS,
        "server.py": PYTHON_SERVER,
        "tool.py": PYTHON_TOOL,
        "readme.txt": README,
        "CLAUDE.md": CLAUDE_MD,
    },
    "node": {
        "Dockerfile": NODE_DOCKERFILE,
        "package.json": NODE_PACKAGE,
        "server.js": NODE_SERVER,
        "tool.js": NODE_TOOL,
        "readme.txt": README,
        "CLAUDE.md": CLAUDE_MD,
    },
}

# Fragments filled once per tool, not written as files
FRAGMENTS = {"tool.py", "tool.js"}


def get_templates(runtime: str) -> Dict[str, str]:
    try:
        return TEMPLATES[runtime]
    except KeyError:
        raise InvalidServerSpec([f"unknown runtime: {runtime!r}"]) from None


def describe_templates(runtime: str) -> List[dict]:
    return [
        {
            "name": name,
            "fragment": name in FRAGMENTS,
            "placeholders": find_placeholders(text),
        }
        for name, text in get_templates(runtime).items()
    ]
