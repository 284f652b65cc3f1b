from college_portal.main import create_app

app = create_app()
