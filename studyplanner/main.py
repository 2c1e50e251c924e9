import uvicorn

from studyplanner.config import PlannerConfig
from studyplanner.server.app import create_app
from studyplanner.server.app_core import StudyPlannerApp


def main():
    config = PlannerConfig.from_env()
    app = create_app(StudyPlannerApp.create(config))

    print(f"StudyPlanner starting on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":
    main()
