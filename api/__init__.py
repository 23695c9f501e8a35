"""FastAPI presentation adapter: REST endpoints and the game WebSocket."""
