"""
RUN SCRIPT - Start the Voyage Estimator server
==============================================

USAGE:
  python run.py

  Then point the chat client at it: voyage-estimator-chat
  API docs: http://localhost:8000/docs

NOTE:
  Before running, set OPENAI_API_KEY in .env.
"""

import uvicorn

from voyage_estimator.config import HOST, PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "voyage_estimator.main:app",
        host=HOST,
        port=PORT,
        reload=True       # Auto-restart when .py files change (useful during development).
    )
