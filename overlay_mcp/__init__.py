"""Overlay MCP: GRE/VXLAN tunnel orchestration between SSH-managed hosts."""
