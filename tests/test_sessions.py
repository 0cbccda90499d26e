from datetime import timedelta
from decimal import Decimal
import threading
from unittest import mock
from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from bookings.models import ParkingSession
from bookings.services import SessionService
from notifications.models import Notification
from utils.exceptions import (
    ActiveSessionExists, InsufficientCapacity, InvalidSessionTransition, LotNotFound, SessionNotFound,
    UserNotFound,
)
from .utils import make_lot, make_user


class SessionServiceTestCase(TestCase):
    def setUp(self):
        self.driver = make_user('driver1')
        self.lot = make_lot(total_spots=2, price_per_hour=Decimal('100'))

    def book(self, slots=1, lot=None, user=None):
        start = timezone.now() + timedelta(hours=1)
        return SessionService.book_parking(
            user or self.driver, (lot or self.lot).id, slots, start, start + timedelta(hours=2)
        )

    def occupancy(self):
        self.lot.refresh_from_db()
        return self.lot.occupied_spots, self.lot.status

    # ---- start / complete ----

    def test_start_session_occupies_one_slot(self):
        session = SessionService.start_session(self.driver, self.lot.id, 'car')

        self.assertEqual(session.status, 'active')
        self.assertEqual(session.slots, 1)
        self.assertIsNotNone(session.start_time)
        self.assertEqual(self.occupancy(), (1, 'available'))

    def test_second_active_session_rejected(self):
        SessionService.start_session(self.driver, self.lot.id)
        with self.assertRaises(ActiveSessionExists):
            SessionService.start_session(self.driver, self.lot.id)
        self.assertEqual(self.occupancy(), (1, 'available'))

    def test_start_session_unknown_lot(self):
        with self.assertRaises(LotNotFound):
            SessionService.start_session(self.driver, 999999)

    def test_start_session_defaults_vehicle_type_to_lot_type(self):
        bike_lot = make_lot(name='Bike Stand', type='bike')
        session = SessionService.start_session(self.driver, bike_lot.id)
        self.assertEqual(session.vehicle_type, 'bike')

    def test_complete_after_45_minutes_bills_one_hour(self):
        session = SessionService.start_session(self.driver, self.lot.id)
        ParkingSession.objects.filter(pk=session.pk).update(start_time=timezone.now() - timedelta(minutes=45))

        completed = SessionService.complete_session(self.driver)

        self.assertEqual(completed.status, 'completed')
        self.assertEqual(completed.total_amount, Decimal('100'))
        self.assertIsNotNone(completed.end_time)
        self.assertEqual(self.occupancy(), (0, 'available'))

    def test_complete_bills_started_hours(self):
        session = SessionService.start_session(self.driver, self.lot.id)
        ParkingSession.objects.filter(pk=session.pk).update(
            start_time=timezone.now() - timedelta(hours=2, minutes=10)
        )
        self.assertEqual(SessionService.complete_session(self.driver).total_amount, Decimal('300'))

    def test_complete_twice_does_not_double_bill(self):
        SessionService.start_session(self.driver, self.lot.id)
        SessionService.complete_session(self.driver)

        with self.assertRaises(SessionNotFound):
            SessionService.complete_session(self.driver)
        self.assertEqual(self.occupancy(), (0, 'available'))
        self.assertEqual(ParkingSession.objects.filter(status='completed').count(), 1)

    # ---- booking / cancel ----

    def test_book_full_capacity_then_cancel(self):
        session = self.book(slots=2)

        self.assertEqual(session.status, 'booked')
        self.assertEqual(session.slots, 2)
        self.assertEqual(self.occupancy(), (2, 'full'))

        canceled = SessionService.cancel_booking(self.driver, session.id)

        self.assertEqual(canceled.status, 'canceled')
        self.assertIsNotNone(canceled.end_time)
        self.assertEqual(self.occupancy(), (0, 'available'))

    def test_book_over_capacity_rejected_without_session(self):
        self.book(slots=1)
        with self.assertRaises(InsufficientCapacity):
            self.book(slots=2)
        self.assertEqual(ParkingSession.objects.count(), 1)
        self.assertEqual(self.occupancy(), (1, 'available'))

    def test_sequential_bookings_stop_at_capacity(self):
        other = make_user('driver2')
        self.book(slots=1)
        self.book(slots=1, user=other)
        with self.assertRaises(InsufficientCapacity):
            self.book(slots=1, user=make_user('driver3'))
        self.assertEqual(self.occupancy(), (2, 'full'))

    def test_book_beyond_any_capacity_rejected(self):
        with self.assertRaises(InsufficientCapacity):
            self.book(slots=10 ** 20)
        self.assertFalse(ParkingSession.objects.exists())
        self.assertEqual(self.occupancy(), (0, 'available'))

    def test_book_unknown_lot(self):
        start = timezone.now()
        with self.assertRaises(LotNotFound):
            SessionService.book_parking(self.driver, 999999, 1, start, start + timedelta(hours=1))

    def test_book_takes_vehicle_type_from_lot(self):
        bike_lot = make_lot(name='Bike Stand', type='bike')
        self.assertEqual(self.book(lot=bike_lot).vehicle_type, 'bike')

    def test_multiple_bookings_allowed(self):
        other_lot = make_lot(name='Other Parking')
        self.book(lot=self.lot)
        self.book(lot=other_lot)
        self.assertEqual(ParkingSession.objects.filter(user=self.driver, status='booked').count(), 2)

    def test_cancel_someone_elses_booking(self):
        session = self.book()
        with self.assertRaises(SessionNotFound):
            SessionService.cancel_booking(make_user('intruder'), session.id)
        self.assertEqual(self.occupancy(), (1, 'available'))

    def test_cancel_is_terminal(self):
        session = self.book()
        SessionService.cancel_booking(self.driver, session.id)
        with self.assertRaises(SessionNotFound):
            SessionService.cancel_booking(self.driver, session.id)
        self.assertEqual(self.occupancy(), (0, 'available'))

    def test_cancel_emits_booking_notification(self):
        session = self.book()
        SessionService.cancel_booking(self.driver, session.id)

        notification = Notification.objects.get(user=self.driver)
        self.assertEqual(notification.type, 'booking')
        self.assertEqual(notification.title, 'Booking Canceled')
        self.assertEqual(notification.metadata, {'parkingLot': self.lot.id, 'session': session.id})

    # ---- guard entry / exit ----

    def test_guard_entry_activates_booking_without_occupancy_change(self):
        session = self.book(slots=2)
        self.assertEqual(self.occupancy(), (2, 'full'))

        entered = SessionService.guard_entry(self.driver.id, self.lot.id)

        self.assertEqual(entered.id, session.id)
        self.assertEqual(entered.status, 'active')
        self.assertEqual(self.occupancy(), (2, 'full'))

    def test_guard_entry_picks_newest_booking(self):
        older = self.book()
        newer = self.book()

        entered = SessionService.guard_entry(self.driver.id, self.lot.id)

        self.assertEqual(entered.id, newer.id)
        older.refresh_from_db()
        self.assertEqual(older.status, 'booked')

    def test_guard_entry_walk_in(self):
        entered = SessionService.guard_entry(self.driver.id, self.lot.id)

        self.assertEqual(entered.status, 'active')
        self.assertEqual(entered.slots, 1)
        self.assertEqual(self.occupancy(), (1, 'available'))

        notification = Notification.objects.get(user=self.driver)
        self.assertEqual(notification.type, 'checkin')
        self.assertIn(self.lot.name, notification.message)

    def test_guard_walk_in_alongside_self_started_session(self):
        other_lot = make_lot(name='Other Parking')
        own = SessionService.start_session(self.driver, other_lot.id)

        walk_in = SessionService.guard_entry(self.driver.id, self.lot.id)

        self.assertNotEqual(walk_in.id, own.id)
        self.assertEqual(ParkingSession.objects.filter(user=self.driver, status='active').count(), 2)

        # Each gate exit settles only the session at its own lot
        SessionService.guard_exit(self.driver.id, other_lot.id)
        own.refresh_from_db()
        walk_in.refresh_from_db()
        self.assertEqual((own.status, walk_in.status), ('completed', 'active'))
        self.assertEqual(self.occupancy(), (1, 'available'))

    def test_guard_entry_unknown_user(self):
        with self.assertRaises(UserNotFound):
            SessionService.guard_entry(999999, self.lot.id)

    def test_guard_exit_settles_and_releases_all_slots(self):
        self.book(slots=2)
        session = SessionService.guard_entry(self.driver.id, self.lot.id)
        ParkingSession.objects.filter(pk=session.pk).update(start_time=timezone.now() - timedelta(minutes=90))

        exited = SessionService.guard_exit(self.driver.id, self.lot.id)

        self.assertEqual(exited.status, 'completed')
        self.assertEqual(exited.total_amount, Decimal('200'))
        self.assertEqual(self.occupancy(), (0, 'available'))

        checkout = Notification.objects.get(user=self.driver, type='checkout')
        self.assertIn('Total: NPR 200.', checkout.message)

    def test_guard_exit_without_active_session(self):
        with self.assertRaises(SessionNotFound):
            SessionService.guard_exit(self.driver.id, self.lot.id)

    def test_guard_exit_only_matches_lot(self):
        other_lot = make_lot(name='Other Parking')
        SessionService.guard_entry(self.driver.id, other_lot.id)
        with self.assertRaises(SessionNotFound):
            SessionService.guard_exit(self.driver.id, self.lot.id)

    def test_notification_failure_keeps_session_change(self):
        with mock.patch('notifications.services.Notification.objects.create',
                        side_effect=DatabaseError('notification store down')):
            session = SessionService.guard_entry(self.driver.id, self.lot.id)

        self.assertEqual(session.status, 'active')
        self.assertEqual(self.occupancy(), (1, 'available'))
        self.assertFalse(Notification.objects.exists())


class SessionTransitionTestCase(TestCase):
    def setUp(self):
        self.session = ParkingSession(
            user=make_user('driver1'),
            parking_lot=make_lot(),
            status='booked',
        )

    def test_booked_can_activate_then_complete(self):
        self.session.transition_to('active')
        self.session.transition_to('completed')
        self.assertTrue(self.session.is_terminal)

    def test_terminal_states_refuse_changes(self):
        for terminal in ('completed', 'canceled'):
            self.session.status = terminal
            for target in ('booked', 'active', 'completed', 'canceled'):
                with self.assertRaises(InvalidSessionTransition):
                    self.session.transition_to(target)

    def test_active_cannot_be_canceled(self):
        self.session.status = 'active'
        with self.assertRaises(InvalidSessionTransition):
            self.session.transition_to('canceled')


class ConcurrentBookingTestCase(TransactionTestCase):
    """Bookings racing for the last slot, each on its own connection"""

    workers = 4

    def setUp(self):
        self.lot = make_lot(total_spots=1)
        self.drivers = [make_user(f'racer{i}') for i in range(self.workers)]

    def test_last_slot_goes_to_exactly_one_booking(self):
        barrier = threading.Barrier(self.workers)
        booked, failed = [], []
        start = timezone.now() + timedelta(hours=1)

        def attempt(driver):
            try:
                barrier.wait()
                booked.append(SessionService.book_parking(
                    driver, self.lot.id, 1, start, start + timedelta(hours=2)
                ))
            except (InsufficientCapacity, DatabaseError) as e:
                # SQLite reports lock contention instead of running the guarded update
                failed.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt, args=(driver,)) for driver in self.drivers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(booked), 1)
        self.assertEqual(len(failed), self.workers - 1)
        self.lot.refresh_from_db()
        self.assertEqual((self.lot.occupied_spots, self.lot.status), (1, 'full'))
        self.assertEqual(ParkingSession.objects.filter(status='booked').count(), 1)
