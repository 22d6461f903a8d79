from fastapi import FastAPI
from mcp.server.fastmcp import FastMCP

from storefront.mcp_handlers import register_mcp
from storefront.routes import register_api_routes

# =====================================================
# 1) FastAPI app
# =====================================================
app = FastAPI(title="Storefront")

# =====================================================
# 2) MCP Server
# =====================================================
mcp = FastMCP(
    name="storefront-mcp",
    sse_path="/sse",
    message_path="/messages/",
)

register_mcp(mcp)


@app.get("/mcp")
async def mcp_info_handler():
    """MCP server info"""
    return {
        "name": "storefront-mcp",
        "version": "1.0.0",
        "protocols": ["sse"],
        "endpoints": {
            "sse": "/mcp/sse",
            "messages": "/mcp/messages/"
        }
    }


app.mount("/mcp", mcp.sse_app())

# =====================================================
# 3) Storefront API and page routes
# =====================================================
register_api_routes(app)


if __name__ == "__main__":
    import uvicorn, os
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
