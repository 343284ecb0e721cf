import logging

from fastapi import FastAPI
from sitemap_analyzer.routers import analysis_router
from sitemap_analyzer.services.config_service import config_service

logging.basicConfig(
    level=config_service.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Sitemap Analyzer API",
    description="API for discovering, classifying and extracting the pages of a site from its sitemap",
    version="1.0.0"
)

# include routers
app.include_router(analysis_router)

@app.get("/")
def read_root():
    """Health check endpoint"""
    return {"message": "Sitemap Analyzer API is running", "status": "healthy"}

@app.get("/health")
def health_check():
    """Detailed health check endpoint"""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "service": "sitemap-analyzer",
        "environment": config_service.environment
    }
