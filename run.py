# run.py

import uvicorn
import os

# PORT is provided by the hosting platform
port = int(os.environ.get("PORT", 5000))

if __name__ == "__main__":
    uvicorn.run(
        "eteeap.main:app",
        host="0.0.0.0",  # Accept connections from any interface
        port=port,
        reload=False
    )
