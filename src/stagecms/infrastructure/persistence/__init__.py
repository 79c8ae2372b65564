"""SQLAlchemy persistence for StageCMS."""
