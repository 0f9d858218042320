# Skinny Studio HTTP API layer
# Created: 2026-02-20
#
# Versioned REST + SSE endpoints for the studio frontend, mounted at /api/v1/.
