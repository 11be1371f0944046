from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from waitlist_api.main import app  # noqa: E402

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
