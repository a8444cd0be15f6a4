"""Manual smoke run against a live server: python tests/smoke_api.py"""
import io
import os

import requests

BASE_URL = os.getenv("SHOWCASE_URL", "http://localhost:8585")

STUDENT = {
    "name": "Smoke Test",
    "roll": "BT21CSE999",
    "email": "bt21999999@iiitn.ac.in",
    "title": "Smoke Test Work",
    "description": "Uploaded by the smoke runner",
}


class SmokeRunner:
    def __init__(self):
        self.work_ids = []

    def log(self, message, status="INFO"):
        colors = {
            "INFO": "\033[94m",
            "SUCCESS": "\033[92m",
            "ERROR": "\033[91m",
            "WARNING": "\033[93m",
        }
        reset = "\033[0m"
        print(f"{colors.get(status, '')}{status}: {message}{reset}")

    def check_health(self):
        """Server answers the health probe"""
        self.log("Checking health...")
        response = requests.get(f"{BASE_URL}/api/health")
        if response.status_code == 200:
            self.log("✓ Server is up", status="SUCCESS")
            return True
        self.log(f"✗ Health check failed: {response.text}", status="ERROR")
        return False

    def check_file_upload(self):
        """Upload a small PNG as a Comic"""
        self.log("Testing file upload...")
        image_data = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00"
        files = {"file": ("smoke.png", io.BytesIO(image_data), "image/png")}
        response = requests.post(
            f"{BASE_URL}/api/upload",
            data=dict(STUDENT, category="Comic"),
            files=files,
        )
        if response.status_code == 201:
            body = response.json()
            self.work_ids.append(body["work"]["_id"])
            self.log(f"✓ Uploaded to {body['cloudUrl']}", status="SUCCESS")
            return True
        self.log(f"✗ File upload failed: {response.text}", status="ERROR")
        return False

    def check_url_upload(self):
        """Submit a Website entry by URL"""
        self.log("Testing URL upload...")
        response = requests.post(
            f"{BASE_URL}/api/upload",
            json=dict(
                STUDENT, category="Website", url="https://example.org/smoke"
            ),
        )
        if response.status_code == 201:
            self.work_ids.append(response.json()["work"]["_id"])
            self.log("✓ Website entry saved", status="SUCCESS")
            return True
        self.log(f"✗ URL upload failed: {response.text}", status="ERROR")
        return False

    def check_rejections(self):
        """Bad URL and bad id are rejected with 400"""
        self.log("Testing rejections...")
        response = requests.post(
            f"{BASE_URL}/api/upload",
            json=dict(STUDENT, category="Website", url="not-a-url"),
        )
        if response.status_code != 400:
            self.log(f"✗ Bad URL accepted: {response.text}", status="ERROR")
            return False
        response = requests.get(f"{BASE_URL}/api/works/not-a-valid-id")
        if response.status_code != 400:
            self.log(f"✗ Bad id not rejected: {response.text}", status="ERROR")
            return False
        self.log("✓ Rejections behave", status="SUCCESS")
        return True

    def check_listing(self):
        """Listing finds the uploaded works by search"""
        self.log("Testing listing...")
        response = requests.get(
            f"{BASE_URL}/api/works",
            params={"search": "smoke test", "sort": "oldest"},
        )
        if response.status_code == 200:
            self.log(
                f"✓ Retrieved {response.json()['count']} works",
                status="SUCCESS",
            )
            return True
        self.log(f"✗ Listing failed: {response.text}", status="ERROR")
        return False

    def cleanup(self):
        """Delete the works created by this run"""
        self.log("Cleaning up...")
        for work_id in self.work_ids:
            response = requests.delete(f"{BASE_URL}/api/works/{work_id}")
            if response.status_code != 200:
                self.log(
                    f"⊘ Could not delete {work_id}: {response.text}",
                    status="WARNING",
                )
        return True

    def run_all(self):
        checks = [
            self.check_health,
            self.check_file_upload,
            self.check_url_upload,
            self.check_rejections,
            self.check_listing,
            self.cleanup,
        ]

        passed = 0
        failed = 0

        for check in checks:
            try:
                if check():
                    passed += 1
                else:
                    failed += 1
            except requests.RequestException as e:
                self.log(
                    f"✗ Check {check.__name__} crashed: {str(e)}",
                    status="ERROR",
                )
                failed += 1
            print()

        self.log("=" * 60, status="INFO")
        self.log(
            f"Checks completed: {passed} passed, {failed} failed",
            status="SUCCESS" if failed == 0 else "WARNING",
        )
        self.log("=" * 60, status="INFO")
        return failed == 0


if __name__ == "__main__":
    SmokeRunner().run_all()
