"""Render the diagrams declared in a Python component through PlantUML."""
