from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typeview.routers import types

app = FastAPI(
    title="typeview",
    description="Resolves the request body types of TypeScript API route handlers.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Editor extensions call in from their own origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(types.router)

@app.get("/api-status")
async def root():
    return {"message": "typeview server is running. Visit /docs for API documentation."}
