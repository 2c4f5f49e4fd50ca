from edumanage.app import create_app
from edumanage.config import settings
from edumanage.app_logger import logger

app = create_app()

if __name__ == '__main__':
    logger.info("EduManage started on port %s", settings.PORT)
    logger.info("Swagger docs: http://localhost:%s/apidocs", settings.PORT)
    app.run(host='0.0.0.0', port=settings.PORT, debug=settings.DEBUG)
