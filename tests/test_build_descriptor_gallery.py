import numpy as np
import pytest

from domain.model import Employee
from domain.use_case.internal_logic import BuildDescriptorGallery
from tests.conftest import (
    FakeFaceDetection,
    FakeImageStorage,
    InMemoryEmployeeRepository,
    make_descriptor,
    make_detection,
    make_frame,
)


def build(employees, detection=None, storage=None, fail=False):
    face_detection = FakeFaceDetection([detection] if detection is not None else [])
    use_case = BuildDescriptorGallery(
        employee_repository=InMemoryEmployeeRepository(employees, fail=fail),
        human_face_detection=face_detection,
        reference_image_storage=storage or FakeImageStorage(),
    )
    return use_case, face_detection


def test_precomputed_descriptor_is_used_without_detection():
    employee = Employee(employee_id="emp-a", name="Alice", avatar_descriptor=make_descriptor(0.1))
    use_case, face_detection = build([employee])

    gallery = use_case.invoke()

    assert list(gallery) == ["emp-a"]
    assert gallery["emp-a"].name == "Alice"
    assert len(gallery["emp-a"].descriptors) == 1
    assert gallery["emp-a"].descriptors[0][0] == pytest.approx(0.1)
    assert face_detection.calls == 0


def test_wrong_length_descriptor_falls_back_to_avatar_image():
    employee = Employee(
        employee_id="emp-a",
        name="Alice",
        avatar_url="https://example.com/alice.jpg",
        avatar_descriptor=[0.1, 0.2, 0.3],
    )
    storage = FakeImageStorage({"https://example.com/alice.jpg": make_frame()})
    use_case, face_detection = build([employee], make_detection(descriptor=make_descriptor(0.4)), storage)

    gallery = use_case.invoke()

    assert face_detection.calls == 1
    np.testing.assert_allclose(gallery["emp-a"].descriptors[0][:1], [0.4])


def test_reference_images_add_descriptors():
    employee = Employee(
        employee_id="emp-a",
        name="Alice",
        avatar_url="alice.jpg",
        reference_images=["alice-2.jpg", "alice-3.jpg"],
    )
    storage = FakeImageStorage({
        "alice.jpg": make_frame(),
        "alice-2.jpg": make_frame(),
        "alice-3.jpg": make_frame(),
    })
    use_case, _ = build([employee], make_detection(), storage)

    gallery = use_case.invoke()

    assert storage.fetched == ["alice.jpg", "alice-2.jpg", "alice-3.jpg"]
    assert len(gallery["emp-a"].descriptors) == 3


def test_failing_reference_is_skipped():
    employee = Employee(
        employee_id="emp-a",
        name="Alice",
        avatar_url="alice.jpg",
        reference_images=["alice-2.jpg"],
    )
    storage = FakeImageStorage(
        images={"alice-2.jpg": make_frame()},
        errors={"alice.jpg": TimeoutError("slow bucket")},
    )
    use_case, _ = build([employee], make_detection(), storage)

    gallery = use_case.invoke()

    assert len(gallery["emp-a"].descriptors) == 1


def test_employee_without_face_is_left_out():
    employees = [
        Employee(employee_id="emp-a", name="Alice", avatar_url="blank.jpg"),
        Employee(employee_id="emp-b", name="Bob", avatar_descriptor=make_descriptor(0.2)),
        Employee(employee_id="emp-c", name="Carol"),
    ]
    storage = FakeImageStorage({"blank.jpg": make_frame()})
    use_case, _ = build(employees, storage=storage)

    assert list(use_case.invoke()) == ["emp-b"]


def test_unreachable_store_gives_empty_gallery():
    use_case, _ = build([], fail=True)

    assert use_case.invoke() == {}


def test_detection_error_on_one_image_keeps_other_employees():
    employees = [
        Employee(employee_id="emp-a", name="Alice", avatar_descriptor=make_descriptor(0.2)),
        Employee(employee_id="emp-b", name="Bob", avatar_url="bob.jpg"),
    ]
    face_detection = FakeFaceDetection(predict_error=RuntimeError("dlib: unsupported image type"))
    use_case = BuildDescriptorGallery(
        employee_repository=InMemoryEmployeeRepository(employees),
        human_face_detection=face_detection,
        reference_image_storage=FakeImageStorage({"bob.jpg": make_frame()}),
    )

    gallery = use_case.invoke()

    assert list(gallery) == ["emp-a"]
    assert face_detection.calls == 1
